"""
Per-file outcome of checking styled declaration order
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .patcher import Diagnostic


class ProcessingStatus(Enum):
    """Outcome of checking one file"""

    CLEAN = "clean"  # declarations already in the desired order
    PROBLEMS = "problems"  # diagnostics reported, nothing written
    FIXED = "fixed"  # at least one fix applied
    ERROR = "error"
    SKIPPED = "skipped"  # nothing to check


@dataclass
class ProcessResult:
    """Diagnostics left in a file and the fixes applied to it"""

    file_path: Path
    status: ProcessingStatus
    diagnostics: list[Diagnostic] = field(default_factory=list)
    changes_applied: int = 0
    error_message: str | None = None
    backup_path: Path | None = None

    @classmethod
    def failed(cls, file_path: Path, error_message: str) -> "ProcessResult":
        return cls(file_path, ProcessingStatus.ERROR, error_message=error_message)

    @property
    def is_clean(self) -> bool:
        """No error and no diagnostic left to report"""
        return self.status != ProcessingStatus.ERROR and not self.diagnostics

    def __str__(self) -> str:
        name = self.file_path.name
        if self.status == ProcessingStatus.ERROR:
            return f"✗ {name}: {self.error_message}"
        if self.status == ProcessingStatus.SKIPPED:
            return f"⊝ {name}: Skipped"
        if self.status == ProcessingStatus.CLEAN:
            return f"= {name}: Declarations in order"
        if self.status == ProcessingStatus.FIXED:
            return (
                f"✓ {name}: {self.changes_applied} declarations moved, "
                f"{len(self.diagnostics)} problems left"
            )
        return f"! {name}: {len(self.diagnostics)} problems"

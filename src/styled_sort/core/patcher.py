"""
Diagnostics and splice patches for displaced declarations
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from .collector import TrackedDeclaration
from .estree import Node, node_range, offset_to_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextEdit:
    """Replacement of the text between two offsets"""

    start: int
    end: int
    text: str

    def apply(self, source: str) -> str:
        return source[: self.start] + self.text + source[self.end :]

    def overlaps(self, other: "TextEdit") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass
class Diagnostic:
    """A reported problem, optionally with a fix"""

    name: str
    anchor: Node
    message: str
    violated_predecessor: str | None = None
    fix: TextEdit | None = None
    line: int = 0
    column: int = 0
    # line and column refer to the text before fixes were written
    stale_position: bool = False

    @property
    def offset(self) -> int:
        return node_range(self.anchor)[0]

    def locate(self, text: str) -> "Diagnostic":
        """Fill line and column from the anchor offset"""
        self.line, self.column = offset_to_position(text, self.offset)
        return self

    def outdated(self) -> "Diagnostic":
        """Copy whose position no longer matches the rewritten file"""
        return replace(self, stale_position=True)

    def format(self, path: str = "<source>") -> str:
        location = f"{path}:{self.line}:{self.column}: {self.message}"
        if self.stale_position:
            location += " (position before fixing)"
        return location


def splice_after(
    text: str,
    moved: TrackedDeclaration,
    reference: TrackedDeclaration,
    separator: str = "\n",
) -> TextEdit:
    """Build the edit that moves one declaration to just after another.

    The code between the two declarations stays in front of the reference
    declaration. Only whitespace between them is replaced by the separator.

    Args:
        text: Full source text
        moved: Declaration that currently comes too early
        reference: Declaration it has to follow
        separator: Text placed between the spliced blocks

    Returns:
        Single edit covering both declarations
    """
    interstitial = text[moved.end : reference.start].strip()
    reference_text = text[reference.start : reference.end]
    moved_text = text[moved.start : moved.end]

    parts = [reference_text, moved_text]
    if interstitial:
        parts.insert(0, interstitial)

    return TextEdit(moved.start, reference.end, separator.join(parts))


def apply_fixes(
    text: str,
    diagnostics: Iterable[Diagnostic],
) -> tuple[str, list[Diagnostic]]:
    """Apply every non-overlapping fix computed from the same text.

    Fixes are taken in source order; a fix that overlaps an accepted one is
    skipped and left for the next pass.

    Returns:
        Tuple of (new text, diagnostics whose fix was applied)
    """
    accepted: list[Diagnostic] = []
    fixable = sorted(
        (d for d in diagnostics if d.fix is not None),
        key=lambda d: (d.fix.start, d.fix.end),
    )
    for diagnostic in fixable:
        if any(diagnostic.fix.overlaps(other.fix) for other in accepted):
            logger.debug(f"Skipping overlapping fix for {diagnostic.name}")
            continue
        accepted.append(diagnostic)

    for diagnostic in reversed(accepted):
        text = diagnostic.fix.apply(text)

    return text, accepted

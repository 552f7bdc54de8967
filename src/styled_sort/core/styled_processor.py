"""
File processor running the styled ordering rule
"""

import logging
import subprocess
from pathlib import Path

from .backup_manager import BackupManager
from .config import Config
from .errors import AstFormatError, ParserCommandError, StyledSortError
from .estree import SourceFile
from .patcher import Diagnostic, apply_fixes
from .results import ProcessingStatus, ProcessResult
from .rule import LintContext, SortStyledDeclarations


class StyledProcessor:
    """Checks, and optionally fixes, styled declaration order in files"""

    def __init__(
        self,
        config: Config | None = None,
        backup_manager: BackupManager | None = None,
    ):
        self.config = config or Config()
        self.rule = SortStyledDeclarations(self.config.rule)
        self.backup_manager = backup_manager
        self.logger = logging.getLogger(self.__class__.__name__)

    # ============================================================
    # AST LOADING
    # ============================================================

    def sidecar_path(self, file_path: Path) -> Path:
        return file_path.with_name(file_path.name + self.config.parser.ast_suffix)

    def run_parser(self, file_path: Path, text: str) -> SourceFile:
        """Parse a file with the configured external parser command"""
        command = [*self.config.parser.command, str(file_path)]
        self.logger.debug(f"Running parser: {' '.join(command)}")
        completed = subprocess.run(command, capture_output=True, text=True)
        if completed.returncode != 0:
            raise ParserCommandError(command, completed.returncode, completed.stderr)
        return SourceFile.from_json(text, completed.stdout, path=file_path)

    def load_source(
        self,
        file_path: Path,
        text: str,
        ast_path: Path | None = None,
    ) -> SourceFile:
        """Obtain the syntax tree for the current text of a file.

        An explicit AST dump wins, then a sidecar dump, then the parser command.
        Dumps read from disk must match the text they are loaded with.

        Raises:
            AstFormatError: No tree is available or a dump is out of date
        """
        if ast_path is None and self.sidecar_path(file_path).exists():
            ast_path = self.sidecar_path(file_path)
        if ast_path is not None:
            source = SourceFile.from_json(
                text, ast_path.read_text(encoding="utf-8"), path=file_path
            )
            source.verify()
            return source
        if self.config.parser.command:
            return self.run_parser(file_path, text)
        raise AstFormatError(
            f"No AST for {file_path}: provide {self.sidecar_path(file_path).name} "
            f"or configure parser.command"
        )

    # ============================================================
    # PROCESSING
    # ============================================================

    def check(self, source: SourceFile) -> list[Diagnostic]:
        """Run the rule over one parsed file"""
        return self.rule.check(LintContext(source))

    def process_batch(self, file_paths: list[Path], **kwargs) -> list[ProcessResult]:
        return [self.process_file(file_path, **kwargs) for file_path in file_paths]

    def process_file(
        self,
        file_path: Path,
        fix: bool = False,
        ast_path: Path | None = None,
    ) -> ProcessResult:
        """
        Check a single file, applying fixes when requested

        Args:
            file_path: Source file
            fix: Rewrite the file with the suggested fixes
            ast_path: Explicit ESTree JSON dump for the file

        Returns:
            ProcessResult with the remaining diagnostics
        """
        try:
            text = file_path.read_text(encoding="utf-8")
            source = self.load_source(file_path, text, ast_path)
            diagnostics = self.check(source)

            if not diagnostics:
                return ProcessResult(file_path, ProcessingStatus.CLEAN)
            if not fix:
                return ProcessResult(
                    file_path, ProcessingStatus.PROBLEMS, diagnostics=diagnostics
                )
            return self._fix_file(file_path, source, diagnostics)

        except (StyledSortError, OSError) as e:
            self.logger.error(f"Error processing {file_path}: {e}")
            return ProcessResult.failed(file_path, str(e))

    def _fix_file(
        self,
        file_path: Path,
        source: SourceFile,
        diagnostics: list[Diagnostic],
    ) -> ProcessResult:
        """Apply fixes pass by pass and write the result"""
        text = source.text
        applied_total = 0
        reparse = bool(self.config.parser.command)

        for fix_pass in range(1, self.config.fix.max_fix_passes + 1):
            text, applied = apply_fixes(text, diagnostics)
            applied_total += len(applied)
            self.logger.debug(
                f"{file_path}: pass {fix_pass} applied {len(applied)} fixes"
            )
            if not applied:
                break
            if not reparse:
                # Without a parser the tree only matches the text before fixing
                diagnostics = [
                    d.outdated() for d in diagnostics if d not in applied
                ]
                break
            diagnostics = self.check(self.run_parser_on_text(file_path, text))
            if not diagnostics:
                break

        if applied_total == 0:
            return ProcessResult(
                file_path, ProcessingStatus.PROBLEMS, diagnostics=diagnostics
            )

        backup_path = None
        if not self.config.dry_run:
            if self.backup_manager:
                backup_path = self.backup_manager.backup_file(file_path)
            file_path.write_text(text, encoding="utf-8")
            self.logger.info(f"Applied {applied_total} fixes to {file_path}")
            self._discard_sidecar(file_path)

        return ProcessResult(
            file_path=file_path,
            status=ProcessingStatus.FIXED,
            diagnostics=diagnostics,
            changes_applied=applied_total,
            backup_path=backup_path,
        )

    def _discard_sidecar(self, file_path: Path) -> None:
        """Remove a sidecar dump that no longer describes the file"""
        sidecar = self.sidecar_path(file_path)
        if sidecar.exists():
            sidecar.unlink()
            self.logger.warning(
                f"Removed {sidecar.name}: it described {file_path.name} before "
                f"fixing; dump the AST again before the next check"
            )

    def run_parser_on_text(self, file_path: Path, text: str) -> SourceFile:
        """Re-parse fixed text through a temporary copy next to the file"""
        scratch = file_path.with_name(f".{file_path.name}.styled-sort{file_path.suffix}")
        scratch.write_text(text, encoding="utf-8")
        try:
            source = self.run_parser(scratch, text)
        finally:
            scratch.unlink(missing_ok=True)
        source.path = file_path
        return source

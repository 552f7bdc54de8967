"""
Check command: reports, and optionally fixes, misplaced styled declarations
"""

import logging
from pathlib import Path

import click

from ..core.backup_manager import BackupManager
from ..core.config import Config
from ..core.file_finder import FileFinder
from ..core.results import ProcessingStatus, ProcessResult
from ..core.styled_processor import StyledProcessor

logger = logging.getLogger(__name__)


class CheckCommand:
    """Command handler for checking styled declaration order"""

    def __init__(self, config: Config):
        """Initialize check command with configuration"""
        self.config = config
        self.finder = FileFinder(config.extensions, config.parser.ast_suffix)

    def execute(
        self,
        path: Path,
        recursive: bool = False,
        fix: bool = False,
        ast_path: Path | None = None,
    ) -> ProcessResult:
        """
        Check every source file under a path

        Args:
            path: File or directory to check
            recursive: Process directories recursively
            fix: Apply fixes to the files
            ast_path: ESTree JSON dump, only valid when path is a single file

        Returns:
            Aggregated ProcessResult; ERROR when a file failed
        """
        if ast_path is not None and not path.is_file():
            return ProcessResult(
                file_path=path,
                status=ProcessingStatus.ERROR,
                error_message="--ast can only be used with a single file",
            )

        files = self.finder.find(path, recursive)
        if not files:
            logger.warning(f"No source files found in {path}")
            return ProcessResult(file_path=path, status=ProcessingStatus.SKIPPED)

        backup_manager = self._backup_manager() if fix else None
        if backup_manager:
            backup_manager.start_session("fix")

        processor = StyledProcessor(self.config, backup_manager=backup_manager)
        results = processor.process_batch(files, fix=fix, ast_path=ast_path)

        if backup_manager:
            backup_manager.finalize_session()

        for result in results:
            self._print_result(result)
        return self._summarize(path, results)

    def _backup_manager(self) -> BackupManager | None:
        """Backup manager for fix runs that write files"""
        if not self.config.backup.enabled or self.config.dry_run:
            return None
        return BackupManager(
            backup_dir=self.config.backup.directory,
            compression=self.config.backup.compression,
            keep_sessions=self.config.backup.keep_sessions,
        )

    def _print_result(self, result: ProcessResult) -> None:
        """Print diagnostics of one file"""
        if result.status == ProcessingStatus.ERROR:
            click.echo(str(result), err=True)
            return
        if result.changes_applied and not self.config.quiet:
            click.echo(str(result))
        for diagnostic in result.diagnostics:
            suffix = "" if diagnostic.fix else " (no automatic fix)"
            click.echo(diagnostic.format(str(result.file_path)) + suffix)

    def _summarize(self, path: Path, results: list[ProcessResult]) -> ProcessResult:
        """Fold per-file results into one"""
        errors = [r for r in results if r.status == ProcessingStatus.ERROR]
        diagnostics = [d for r in results for d in r.diagnostics]
        fixed = sum(r.changes_applied for r in results)

        if not self.config.quiet:
            click.echo(
                f"\n{len(results)} files checked, {len(diagnostics)} problems, "
                f"{fixed} fixes applied, {len(errors)} errors"
            )

        if errors:
            status = ProcessingStatus.ERROR
        elif diagnostics:
            status = ProcessingStatus.PROBLEMS
        elif fixed:
            status = ProcessingStatus.FIXED
        else:
            status = ProcessingStatus.CLEAN

        return ProcessResult(
            file_path=path,
            status=status,
            diagnostics=diagnostics,
            changes_applied=fixed,
            error_message=f"{len(errors)} files failed" if errors else None,
        )

"""
Locates JavaScript/TypeScript sources to check
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = {"node_modules", "dist", "build", "coverage"}


class FileFinder:
    """Finder for source files by extension"""

    def __init__(self, extensions: list[str], ast_suffix: str = ""):
        """
        Initialize file finder.

        Args:
            extensions: File extensions to collect (e.g. ".jsx")
            ast_suffix: Suffix of sidecar AST dumps, never collected as sources
        """
        self.extensions = {ext.lower() for ext in extensions}
        self.ast_suffix = ast_suffix

    def is_source(self, path: Path) -> bool:
        if self.ast_suffix and path.name.endswith(self.ast_suffix):
            return False
        return path.suffix.lower() in self.extensions

    def _skip_directory(self, path: Path) -> bool:
        return path.name in SKIPPED_DIRECTORIES or path.name.startswith(".")

    def find(self, path: Path, recursive: bool = False) -> list[Path]:
        """
        Collect source files under a path.

        Args:
            path: File or directory
            recursive: Descend into subdirectories

        Returns:
            Sorted list of source files
        """
        if path.is_file():
            return [path] if self.is_source(path) else []

        files = []
        pending = [path]
        while pending:
            directory = pending.pop()
            for item in directory.iterdir():
                if item.is_dir():
                    if recursive and not self._skip_directory(item):
                        pending.append(item)
                elif self.is_source(item):
                    files.append(item)

        logger.debug(f"Found {len(files)} source files under {path}")
        return sorted(files)

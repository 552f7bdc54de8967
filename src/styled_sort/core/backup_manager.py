"""
Backups of source files rewritten by --fix
"""

import json
import logging
import shutil
import tarfile
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SESSION_PREFIX = "fix_"
METADATA_FILE = "session.json"


@dataclass
class FixSession:
    """One run of fixes and the files it touched"""

    session_id: str
    timestamp: str
    directory: Path
    files: list[str] = field(default_factory=list)
    compressed: bool = False


def backup_key(file_path: Path) -> Path:
    """Location of a file inside a session directory"""
    file_path = file_path.resolve()
    return Path(*file_path.parts[1:])


class BackupManager:
    """Keeps a copy of every file before fixes are written to it"""

    def __init__(
        self,
        backup_dir: str = ".backups",
        compression: bool = False,
        keep_sessions: int = 10,
    ):
        """
        Initialize backup manager

        Args:
            backup_dir: Directory holding the sessions
            compression: Store finalized sessions as tar.gz archives
            keep_sessions: Number of most recent sessions to keep
        """
        self.backup_dir = Path(backup_dir)
        self.compression = compression
        self.keep_sessions = keep_sessions
        self.current_session: FixSession | None = None
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def start_session(self, description: str | None = None) -> Path:
        """Open a new session directory"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        session_id = f"{SESSION_PREFIX}{timestamp}"
        if description:
            session_id = f"{session_id}_{description}"
        directory = self.backup_dir / session_id
        directory.mkdir(parents=True, exist_ok=True)
        self.current_session = FixSession(session_id, timestamp, directory)
        logger.info(f"Started backup session: {session_id}")
        return directory

    def backup_file(self, file_path: Path) -> Path | None:
        """Copy a file into the current session before it is rewritten"""
        if not self.current_session:
            self.start_session()

        if not file_path.exists():
            logger.warning(f"File does not exist: {file_path}")
            return None

        if str(file_path.resolve()) in self.current_session.files:
            return self.current_session.directory / backup_key(file_path)

        backup_path = self.current_session.directory / backup_key(file_path)
        backup_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(file_path, backup_path)
        self.current_session.files.append(str(file_path.resolve()))
        logger.debug(f"Backed up: {file_path} -> {backup_path}")
        return backup_path

    def finalize_session(self) -> Path | None:
        """Write session metadata, compress if configured and prune old sessions"""
        session = self.current_session
        if not session:
            logger.warning("No active backup session")
            return None

        with open(session.directory / METADATA_FILE, "w") as f:
            json.dump(asdict(session), f, indent=2, default=str)

        result = session.directory
        if self.compression:
            archive_path = self.backup_dir / f"{session.session_id}.tar.gz"
            with tarfile.open(archive_path, "w:gz") as tar:
                tar.add(session.directory, arcname=session.session_id)
            shutil.rmtree(session.directory)
            session.compressed = True
            result = archive_path

        self.cleanup_old_sessions()
        logger.info(f"Finalized backup session: {session.session_id}")
        self.current_session = None
        return result

    def _session_entries(self) -> list[Path]:
        return [
            item
            for item in self.backup_dir.iterdir()
            if item.name.startswith(SESSION_PREFIX)
            and (item.is_dir() or item.name.endswith(".tar.gz"))
        ]

    def cleanup_old_sessions(self) -> int:
        """Remove sessions beyond the keep_sessions limit

        Returns:
            Number of sessions removed
        """
        entries = sorted(
            self._session_entries(), key=lambda x: x.stat().st_mtime, reverse=True
        )
        removed = 0
        for entry in entries[self.keep_sessions :]:
            if entry.is_dir():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            removed += 1
            logger.debug(f"Removed old backup: {entry}")
        return removed

    def list_sessions(self) -> list[dict[str, Any]]:
        """Describe every stored session, newest first"""
        sessions = []
        for entry in self._session_entries():
            metadata_file = entry / METADATA_FILE
            if entry.is_dir() and metadata_file.exists():
                with open(metadata_file, "r") as f:
                    sessions.append(json.load(f))
                continue
            sessions.append(
                {
                    "session_id": entry.name.removesuffix(".tar.gz"),
                    "compressed": not entry.is_dir(),
                    "timestamp": datetime.fromtimestamp(
                        entry.stat().st_mtime
                    ).strftime("%Y%m%d_%H%M%S_%f"),
                }
            )
        return sorted(sessions, key=lambda x: x.get("timestamp", ""), reverse=True)

    def restore_session(self, session_id: str) -> bool:
        """Copy every file of a session back to its original location"""
        session_path = self.backup_dir / session_id
        archive_path = self.backup_dir / f"{session_id}.tar.gz"
        extracted = False

        try:
            if not session_path.exists() and archive_path.exists():
                with tarfile.open(archive_path, "r:gz") as tar:
                    tar.extractall(self.backup_dir, filter="data")
                extracted = True

            metadata_file = session_path / METADATA_FILE
            if not metadata_file.exists():
                logger.error(f"Backup session not found: {session_id}")
                return False

            with open(metadata_file, "r") as f:
                metadata = json.load(f)

            for original in map(Path, metadata.get("files", [])):
                backup = session_path / backup_key(original)
                if backup.exists():
                    original.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(backup, original)
                    logger.info(f"Restored: {original}")
            return True
        except (OSError, tarfile.TarError, json.JSONDecodeError) as e:
            logger.error(f"Error restoring session {session_id}: {e}")
            return False
        finally:
            if extracted and session_path.exists():
                shutil.rmtree(session_path)

import logging
import datetime
from pathlib import Path
from typing import Callable, List, Optional

from error_handler import BackupFailed

logger = logging.getLogger(__name__)

BACKUP_MARKER = "_backup_"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class BackupManager:
    """Copies an artifact to a timestamped sibling before it is changed.

    Backups are named <name>_backup_<YYYYMMDD_HHMMSS>, hold the exact bytes
    of the original and are never rotated or pruned.
    """

    def __init__(self, clock: Optional[Callable[[], datetime.datetime]] = None):
        self.clock = clock or datetime.datetime.now

    def backup_name(self, path: Path) -> str:
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        return f"{path.name}{BACKUP_MARKER}{timestamp}"

    def backup_if_exists(self, path) -> Optional[Path]:
        """Back up path if it exists.

        Returns:
            Optional[Path]: Path of the new backup, or None if there was nothing to back up

        Raises:
            BackupFailed: if the original could not be read or the copy not written
        """
        path = Path(path)
        if not path.exists():
            return None

        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error(f"Could not read {path} for backup: {e}")
            raise BackupFailed(path, e) from e

        base_name = self.backup_name(path)
        backup_path = path.with_name(base_name)
        counter = 0
        while True:
            try:
                # "xb" refuses to clobber a backup taken earlier in the same second
                f = open(backup_path, "xb")
            except FileExistsError:
                counter += 1
                backup_path = path.with_name(f"{base_name}_{counter}")
                continue
            except OSError as e:
                logger.error(f"Could not create backup {backup_path}: {e}")
                raise BackupFailed(path, e) from e

            try:
                with f:
                    f.write(content)
            except OSError as e:
                logger.error(f"Could not write backup {backup_path}: {e}")
                # A truncated copy must not pass for a snapshot
                try:
                    backup_path.unlink()
                except OSError as cleanup_err:
                    logger.warning(f"Could not remove partial backup {backup_path}: {cleanup_err}")
                raise BackupFailed(path, e) from e
            break

        logger.info(f"Backup created: {backup_path}")
        return backup_path

    def list_backups(self, path) -> List[Path]:
        """Existing backups of path, oldest first."""
        path = Path(path)
        if not path.parent.is_dir():
            return []
        prefix = f"{path.name}{BACKUP_MARKER}"
        return sorted(p for p in path.parent.iterdir() if p.name.startswith(prefix) and p.is_file())


def backup_if_exists(path) -> Optional[Path]:
    return BackupManager().backup_if_exists(path)

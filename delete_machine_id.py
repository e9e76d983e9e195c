import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
from colorama import Fore, Style, init

from backup_manager import BackupManager
from cursor_paths import PathResolver
from error_handler import IdentityIOError

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)

EMOJI = {
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
    "BACKUP": "💾",
    "WARNING": "⚠️",
}


class Confirmer:
    def confirm(self, prompt: str) -> bool:
        raise NotImplementedError


class ConsoleConfirmer(Confirmer):
    """Asks on stdin; anything but y/yes counts as no."""

    def confirm(self, prompt: str) -> bool:
        try:
            answer = input(f"{Fore.YELLOW}{EMOJI['WARNING']} {prompt} (y/N): {Style.RESET_ALL}")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


class StaticConfirmer(Confirmer):
    """Returns a fixed answer, for --yes and tests."""

    def __init__(self, answer: bool):
        self.answer = answer

    def confirm(self, prompt: str) -> bool:
        return self.answer


class DeleteOutcome(Enum):
    DELETED = "deleted"
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"


@dataclass
class DeleteReport:
    outcome: DeleteOutcome
    path: Path
    backup_path: Optional[Path] = None


def delete_machine_id(resolver: Optional[PathResolver] = None,
                      confirmer: Optional[Confirmer] = None,
                      backups: Optional[BackupManager] = None) -> DeleteReport:
    """Back up and remove the machineid file after confirmation.

    storage.json is never touched here.

    Raises:
        BackupFailed: if the backup could not be made; the file is kept
        IdentityIOError: if removal failed; the backup stays on disk
    """
    resolver = resolver or PathResolver()
    confirmer = confirmer or ConsoleConfirmer()
    backups = backups or BackupManager()

    path = resolver.machine_id_path()
    if not path.is_file():
        print(f"{Fore.YELLOW}{EMOJI['INFO']} No machineid file found at {path}{Style.RESET_ALL}")
        return DeleteReport(DeleteOutcome.NOT_FOUND, path)

    if not confirmer.confirm(f"Delete the device ID file {path}?"):
        print(f"{Fore.YELLOW}{EMOJI['INFO']} Deletion cancelled{Style.RESET_ALL}")
        return DeleteReport(DeleteOutcome.CANCELLED, path)

    backup_path = backups.backup_if_exists(path)
    if backup_path:
        print(f"{Fore.GREEN}{EMOJI['BACKUP']} Backup created: {backup_path}{Style.RESET_ALL}")

    try:
        path.unlink()
    except OSError as e:
        logger.error(f"Failed to remove {path}: {e}")
        raise IdentityIOError("remove", path, e) from e

    logger.info(f"machineid file removed: {path}")
    print(f"{Fore.GREEN}{EMOJI['SUCCESS']} Device ID file deleted{Style.RESET_ALL}")
    return DeleteReport(DeleteOutcome.DELETED, path, backup_path)

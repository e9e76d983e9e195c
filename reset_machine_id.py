import os
import json
import shutil
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from colorama import Fore, Style, init

from backup_manager import BackupManager
from cursor_paths import PathResolver
from error_handler import IdentityIOError, ParseError
from machine_ids import IdentitySet, generate_ids

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)

# Define emoji constants
EMOJI = {
    "FILE": "📄",
    "BACKUP": "💾",
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
    "RESET": "🔄",
    "WARNING": "⚠️",
}


def load_storage_record(path: Path) -> Dict[str, Any]:
    """Read storage.json and return its top-level object.

    Raises:
        IdentityIOError: if the file cannot be read
        ParseError: if the content is not a JSON object
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise IdentityIOError("read", path, e) from e

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(path, e) from e
    if not isinstance(data, dict):
        raise ParseError(path, ValueError(f"top-level value is {type(data).__name__}, not an object"))
    return data


def atomic_write_text(path: Path, text: str) -> None:
    """Replace path's content via a temp file in the same directory.

    Raises:
        IdentityIOError: if the directory cannot be created or the write fails
    """
    try:
        os.makedirs(path.parent, exist_ok=True)
    except OSError as e:
        raise IdentityIOError("write", path, e) from e

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(mode="w", encoding="utf-8", delete=False,
                                         dir=path.parent, prefix=f"{path.name}.") as tmp_file:
            tmp_file.write(text)
            tmp_path = tmp_file.name
        shutil.move(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise IdentityIOError("write", path, e) from e
    finally:
        # Clean up temp file if it wasn't moved
        if tmp_path and os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError as cleanup_err:
                logger.warning(f"Could not remove temp file {tmp_path}: {cleanup_err}")


@dataclass
class UpdateReport:
    ids: IdentitySet
    machine_id_path: Path
    storage_path: Path
    machine_id_backup: Optional[Path] = None
    storage_backup: Optional[Path] = None
    storage_recovered: bool = False


class RecordUpdater:
    """Writes a new IdentitySet into the machineid file and storage.json.

    Every existing artifact is backed up before it is replaced; a failed
    backup stops the update before anything is written. The two files are
    updated one after the other with no rollback between them.
    """

    def __init__(self, resolver: Optional[PathResolver] = None,
                 backups: Optional[BackupManager] = None):
        self.resolver = resolver or PathResolver()
        self.backups = backups or BackupManager()

    def apply(self, new_ids: IdentitySet) -> UpdateReport:
        # Resolve both up front so a missing base directory aborts before any write
        machine_id_path = self.resolver.machine_id_path()
        storage_path = self.resolver.storage_path()
        report = UpdateReport(ids=new_ids, machine_id_path=machine_id_path, storage_path=storage_path)

        report.machine_id_backup = self.update_machine_id_file(machine_id_path, new_ids)
        report.storage_backup, report.storage_recovered = self.update_storage_json(storage_path, new_ids)
        return report

    def update_machine_id_file(self, path: Path, new_ids: IdentitySet) -> Optional[Path]:
        """Replace the machineid file with the new primary id."""
        print(f"{Fore.CYAN}{EMOJI['FILE']} Updating machineId file: {path}{Style.RESET_ALL}")
        backup_path = self.backups.backup_if_exists(path)
        if backup_path:
            print(f"{Fore.GREEN}{EMOJI['BACKUP']} Backup created: {backup_path}{Style.RESET_ALL}")

        atomic_write_text(path, new_ids.primary_id)
        logger.info(f"machineId file updated: {path}")
        print(f"{Fore.GREEN}{EMOJI['SUCCESS']} machineId updated: {new_ids.primary_id}{Style.RESET_ALL}")
        return backup_path

    def update_storage_json(self, path: Path, new_ids: IdentitySet):
        """Merge the managed telemetry keys into storage.json.

        Returns:
            Tuple[Optional[Path], bool]: backup path and whether malformed content was discarded
        """
        print(f"{Fore.CYAN}{EMOJI['FILE']} Updating storage.json: {path}{Style.RESET_ALL}")
        existed = path.exists()
        backup_path = self.backups.backup_if_exists(path)
        if backup_path:
            print(f"{Fore.GREEN}{EMOJI['BACKUP']} Backup created: {backup_path}{Style.RESET_ALL}")
        elif not existed:
            print(f"{Fore.YELLOW}{EMOJI['INFO']} storage.json does not exist, will create.{Style.RESET_ALL}")

        storage_content = new_ids.as_storage_values()
        recovered = False
        if existed:
            try:
                existing = load_storage_record(path)
                existing.update(storage_content)
                storage_content = existing
            except ParseError as e:
                # The backup keeps the unparseable content
                logger.warning(f"Discarding malformed storage.json: {e}")
                print(f"{Fore.YELLOW}{EMOJI['WARNING']} storage.json is corrupted, writing a fresh record "
                      f"(original kept in {backup_path}){Style.RESET_ALL}")
                recovered = True

        atomic_write_text(path, json.dumps(storage_content, indent=4, sort_keys=True, ensure_ascii=False))
        logger.info(f"storage.json updated: {path}")
        print(f"{Fore.GREEN}{EMOJI['SUCCESS']} storage.json updated:{Style.RESET_ALL}")
        for key, value in new_ids.as_storage_values().items():
            print(f"  {EMOJI['INFO']} {key}: {Fore.GREEN}{value}{Style.RESET_ALL}")
        return backup_path, recovered


def reset_machine_ids(resolver: Optional[PathResolver] = None) -> UpdateReport:
    """Generate a new identity and write it to both artifacts."""
    print(f"{Fore.CYAN}{EMOJI['RESET']} Generating new machine IDs...{Style.RESET_ALL}")
    return RecordUpdater(resolver).apply(generate_ids())

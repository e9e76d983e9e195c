import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from colorama import Fore, Style, init

from backup_manager import BackupManager
from cursor_paths import PathResolver
from error_handler import IdentityToolError, NoBaseDirectory
from machine_ids import MANAGED_KEYS
from reset_machine_id import load_storage_record

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)

EMOJI = {
    "FILE": "📄",
    "INFO": "ℹ️",
    "BACKUP": "💾",
    "WARNING": "⚠️",
}

NOT_FOUND = "not found"


@dataclass
class InspectionReport:
    machine_id_path: Optional[Path] = None
    machine_id: str = NOT_FOUND
    storage_path: Optional[Path] = None
    storage_values: Dict[str, str] = field(default_factory=lambda: {key: NOT_FOUND for key in MANAGED_KEYS})
    machine_id_backups: int = 0
    storage_backups: int = 0


class IdentityInspector:
    """Read-only view of the identifiers currently on disk.

    Any problem reading the files shows up as NOT_FOUND in the report.
    """

    def __init__(self, resolver: Optional[PathResolver] = None,
                 backups: Optional[BackupManager] = None):
        self.resolver = resolver or PathResolver()
        self.backups = backups or BackupManager()

    def inspect(self) -> InspectionReport:
        report = InspectionReport()
        try:
            report.machine_id_path = self.resolver.machine_id_path()
            report.storage_path = self.resolver.storage_path()
        except NoBaseDirectory as e:
            logger.warning(f"Cannot inspect identity files: {e}")
            return report

        report.machine_id = self._read_machine_id(report.machine_id_path)
        report.storage_values.update(self._read_storage_values(report.storage_path))
        try:
            report.machine_id_backups = len(self.backups.list_backups(report.machine_id_path))
            report.storage_backups = len(self.backups.list_backups(report.storage_path))
        except OSError as e:
            logger.debug(f"Could not list backups: {e}")
        return report

    def _read_machine_id(self, path: Path) -> str:
        try:
            content = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"machineId not readable at {path}: {e}")
            return NOT_FOUND
        return content or NOT_FOUND

    def _read_storage_values(self, path: Path) -> Dict[str, str]:
        if not path.is_file():
            return {}
        try:
            record = load_storage_record(path)
        except IdentityToolError as e:
            logger.debug(f"storage.json not usable: {e}")
            return {}
        return {key: record[key] for key in MANAGED_KEYS if isinstance(record.get(key), str)}


def print_report(report: InspectionReport) -> None:
    if report.machine_id_path is None:
        print(f"{Fore.YELLOW}{EMOJI['WARNING']} Could not determine the Cursor configuration directory{Style.RESET_ALL}")
        return

    print(f"{Fore.CYAN}{EMOJI['FILE']} machineid file: {report.machine_id_path}{Style.RESET_ALL}")
    print(f"  {EMOJI['INFO']} machineid: {Fore.GREEN}{report.machine_id}{Style.RESET_ALL}")
    if report.machine_id_backups:
        print(f"  {EMOJI['BACKUP']} backups: {report.machine_id_backups}")

    print(f"\n{Fore.CYAN}{EMOJI['FILE']} storage.json file: {report.storage_path}{Style.RESET_ALL}")
    for key, value in report.storage_values.items():
        print(f"  {EMOJI['INFO']} {key}: {Fore.GREEN}{value}{Style.RESET_ALL}")
    if report.storage_backups:
        print(f"  {EMOJI['BACKUP']} backups: {report.storage_backups}")


def show_machine_ids(resolver: Optional[PathResolver] = None) -> InspectionReport:
    report = IdentityInspector(resolver).inspect()
    print_report(report)
    return report

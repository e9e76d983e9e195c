"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from backup_manager import BackupManager
from cursor_paths import PathResolver
from utils import StaticDirectoryProvider


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Stand-in for the user's configuration root."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def resolver(base_dir: Path) -> PathResolver:
    """Linux-layout resolver rooted at base_dir."""
    return PathResolver(StaticDirectoryProvider(base_dir), system="Linux")


@pytest.fixture
def storage_path(base_dir: Path) -> Path:
    return base_dir / "Cursor" / "User" / "globalStorage" / "storage.json"


@pytest.fixture
def machine_id_path(base_dir: Path) -> Path:
    return base_dir / "Cursor" / "machineid"


@pytest.fixture
def write_storage(storage_path: Path):
    """Write a storage.json at the canonical location."""
    def _write(content) -> Path:
        storage_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            storage_path.write_text(content, encoding="utf-8")
        else:
            storage_path.write_text(json.dumps(content), encoding="utf-8")
        return storage_path
    return _write


class TickingClock:
    """Returns a new second on every call so backups get distinct names."""

    def __init__(self):
        from datetime import datetime
        self.current = datetime(2024, 5, 17, 9, 30, 0)

    def __call__(self):
        from datetime import timedelta
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture
def backups() -> BackupManager:
    return BackupManager(clock=TickingClock())

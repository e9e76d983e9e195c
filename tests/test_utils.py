import pytest

import utils
from error_handler import NoBaseDirectory
from utils import PlatformDirectoryProvider


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setattr(utils, "get_actual_home_dir", lambda: str(tmp_path))
    return tmp_path


def test_linux_uses_xdg_config_home(home, monkeypatch, tmp_path):
    monkeypatch.delenv("SUDO_USER", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert PlatformDirectoryProvider("Linux").base_dir() == tmp_path / "xdg"


def test_linux_ignores_relative_xdg_config_home(home, monkeypatch):
    monkeypatch.delenv("SUDO_USER", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
    assert PlatformDirectoryProvider("Linux").base_dir() == home / ".config"


def test_macos_uses_application_support(home):
    assert PlatformDirectoryProvider("Darwin").base_dir() == home / "Library" / "Application Support"


def test_windows_prefers_localappdata(home, monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "Local"))
    assert PlatformDirectoryProvider("Windows").base_dir() == tmp_path / "Local"


def test_windows_falls_back_to_home(home, monkeypatch):
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    assert PlatformDirectoryProvider("Windows").base_dir() == home / "AppData" / "Local"


def test_no_home_raises(monkeypatch):
    monkeypatch.setattr(utils, "get_actual_home_dir", lambda: "")
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    with pytest.raises(NoBaseDirectory):
        PlatformDirectoryProvider("Linux").base_dir()
    with pytest.raises(NoBaseDirectory):
        PlatformDirectoryProvider("Windows").base_dir()


def test_unresolvable_home_is_reported_empty(monkeypatch):
    monkeypatch.delenv("SUDO_USER", raising=False)
    monkeypatch.setattr(utils.os.path, "expanduser", lambda p: p)
    assert utils.get_actual_home_dir() == ""

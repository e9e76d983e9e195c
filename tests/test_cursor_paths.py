from pathlib import Path

import pytest

from cursor_paths import ArtifactKind, PathResolver, default_install_dirs
from error_handler import NoBaseDirectory
from utils import DirectoryProvider, StaticDirectoryProvider


class MissingHomeProvider(DirectoryProvider):
    def base_dir(self) -> Path:
        raise NoBaseDirectory()


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x")
    return path


def test_defaults_to_canonical_path_when_nothing_exists(resolver, base_dir):
    assert resolver.resolve(ArtifactKind.STORAGE) == base_dir / "Cursor" / "User" / "globalStorage" / "storage.json"
    assert resolver.resolve(ArtifactKind.MACHINE_ID) == base_dir / "Cursor" / "machineid"


def test_resolve_does_not_create_anything(resolver, base_dir):
    resolver.resolve(ArtifactKind.STORAGE)
    resolver.resolve(ArtifactKind.MACHINE_ID)
    assert list(base_dir.iterdir()) == []


def test_falls_back_to_alternate_layout(resolver, base_dir):
    alternate = touch(base_dir / ".cursor" / "machineid")
    assert resolver.machine_id_path() == alternate


def test_lowercase_layout_is_probed_last(resolver, base_dir):
    lowercase = touch(base_dir / "cursor" / "User" / "globalStorage" / "storage.json")
    assert resolver.storage_path() == lowercase

    hidden = touch(base_dir / ".cursor" / "User" / "globalStorage" / "storage.json")
    assert resolver.storage_path() == hidden


def test_canonical_wins_when_several_exist(resolver, base_dir):
    touch(base_dir / ".cursor" / "machineid")
    canonical = touch(base_dir / "Cursor" / "machineid")
    assert resolver.machine_id_path() == canonical


def test_directory_at_candidate_path_is_not_a_match(resolver, base_dir):
    (base_dir / ".cursor" / "machineid").mkdir(parents=True)
    assert resolver.machine_id_path() == base_dir / "Cursor" / "machineid"


def test_windows_layout(base_dir):
    resolver = PathResolver(StaticDirectoryProvider(base_dir), system="Windows")
    assert resolver.candidates(ArtifactKind.MACHINE_ID) == [
        base_dir / "Programs" / "cursor" / "machineid",
        base_dir / "cursor" / "machineid",
    ]
    alternate = touch(base_dir / "cursor" / "User" / "globalStorage" / "storage.json")
    assert resolver.storage_path() == alternate


def test_install_dirs_override(base_dir):
    resolver = PathResolver(StaticDirectoryProvider(base_dir), system="Linux",
                            install_dirs=["Cursor-Nightly", "Cursor"])
    assert resolver.machine_id_path() == base_dir / "Cursor-Nightly" / "machineid"
    existing = touch(base_dir / "Cursor" / "machineid")
    assert resolver.machine_id_path() == existing


def test_default_install_dirs_per_platform():
    assert default_install_dirs("Darwin") == ("Cursor", ".cursor", "cursor")
    assert default_install_dirs("Linux")[0] == "Cursor"
    assert default_install_dirs("Windows")[-1] == "cursor"


def test_missing_base_directory_raises():
    resolver = PathResolver(MissingHomeProvider(), system="Linux")
    with pytest.raises(NoBaseDirectory):
        resolver.resolve(ArtifactKind.STORAGE)

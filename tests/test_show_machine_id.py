from pathlib import Path

from cursor_paths import PathResolver
from error_handler import NoBaseDirectory
from machine_ids import DEV_DEVICE_ID_KEY, MAC_MACHINE_ID_KEY, MACHINE_ID_KEY, generate_ids
from reset_machine_id import RecordUpdater
from show_machine_id import NOT_FOUND, IdentityInspector, print_report, show_machine_ids
from utils import DirectoryProvider


def test_everything_missing_reports_not_found(resolver, machine_id_path, storage_path):
    report = IdentityInspector(resolver).inspect()

    assert report.machine_id_path == machine_id_path
    assert report.storage_path == storage_path
    assert report.machine_id == NOT_FOUND
    assert set(report.storage_values.values()) == {NOT_FOUND}
    assert report.machine_id_backups == 0


def test_reads_trimmed_machine_id_and_storage_values(resolver, machine_id_path, write_storage):
    machine_id_path.parent.mkdir(parents=True, exist_ok=True)
    machine_id_path.write_text("  abc-123 \n")
    write_storage({MAC_MACHINE_ID_KEY: "mac", MACHINE_ID_KEY: "machine", "other": "x"})

    report = IdentityInspector(resolver).inspect()

    assert report.machine_id == "abc-123"
    assert report.storage_values == {
        MAC_MACHINE_ID_KEY: "mac",
        MACHINE_ID_KEY: "machine",
        DEV_DEVICE_ID_KEY: NOT_FOUND,
    }


def test_non_string_values_count_as_missing(resolver, write_storage):
    write_storage({MACHINE_ID_KEY: 42, DEV_DEVICE_ID_KEY: None})
    report = IdentityInspector(resolver).inspect()
    assert report.storage_values[MACHINE_ID_KEY] == NOT_FOUND
    assert report.storage_values[DEV_DEVICE_ID_KEY] == NOT_FOUND


def test_malformed_storage_degrades_to_not_found(resolver, write_storage):
    write_storage("garbage{")
    report = IdentityInspector(resolver).inspect()
    assert set(report.storage_values.values()) == {NOT_FOUND}


def test_inspect_does_not_modify_anything(resolver, base_dir, write_storage):
    storage = write_storage({"a": 1})
    before = storage.read_bytes()
    IdentityInspector(resolver).inspect()
    assert storage.read_bytes() == before
    assert sorted(p.name for p in storage.parent.iterdir()) == ["storage.json"]


def test_reflects_a_regenerate(resolver, backups):
    ids = generate_ids()
    RecordUpdater(resolver, backups).apply(ids)
    RecordUpdater(resolver, backups).apply(ids)

    report = IdentityInspector(resolver, backups).inspect()

    assert report.machine_id == ids.primary_id
    assert report.storage_values[DEV_DEVICE_ID_KEY] == ids.primary_id
    assert report.storage_values[MACHINE_ID_KEY] == ids.tertiary_hashed_id
    assert report.machine_id_backups == 1
    assert report.storage_backups == 1


def test_missing_base_directory_never_raises():
    class NoHome(DirectoryProvider):
        def base_dir(self) -> Path:
            raise NoBaseDirectory()

    report = IdentityInspector(PathResolver(NoHome(), system="Linux")).inspect()

    assert report.machine_id_path is None
    assert report.machine_id == NOT_FOUND
    print_report(report)


def test_show_machine_ids_returns_report(resolver):
    report = show_machine_ids(resolver)
    assert report.machine_id == NOT_FOUND


def test_undecodable_storage_is_reported_as_missing(resolver, storage_path, machine_id_path):
    storage_path.parent.mkdir(parents=True, exist_ok=True)
    storage_path.write_bytes(b"\xff\xfe garbage \x80")
    machine_id_path.write_bytes(b"\xff\x80")

    report = IdentityInspector(resolver).inspect()

    assert report.machine_id == NOT_FOUND
    assert set(report.storage_values.values()) == {NOT_FOUND}

import json
from datetime import date, datetime

import pytest

from core.store import (
    BackupManager, FailSafeStore, InMemoryStore, JsonFileStore, MirroredStore,
    StoreUnavailableError
)


def test_in_memory_store_basic_operations():
    store = InMemoryStore()
    store.set("simran_2026-10-21", True)
    store.set("paath_angs_2026-10-21", 12)
    store.set("paath_start_date", date(2026, 10, 1))
    store.set("habit_config", b"[]")

    assert store.get_bool("simran_2026-10-21") is True
    assert store.get_int("paath_angs_2026-10-21") == 12
    assert store.get_date("paath_start_date") == date(2026, 10, 1)
    assert store.get_bytes("habit_config") == b"[]"
    assert store.contains("simran_2026-10-21")

    store.remove("simran_2026-10-21")
    store.remove("simran_2026-10-21")
    assert not store.contains("simran_2026-10-21")


def test_typed_readers_degrade_on_wrong_type():
    store = InMemoryStore({"a": 5, "b": True})
    assert store.get_bool("a") is False
    assert store.get_date("a") is None
    assert store.get_int("missing") == 0
    assert store.get_int("b") == 1


def test_unsupported_values_are_rejected():
    store = InMemoryStore()
    with pytest.raises(TypeError):
        store.set("k", "text")
    with pytest.raises(TypeError):
        store.set("k", datetime(2026, 10, 21, 9, 0))


def test_remove_prefix_only_touches_matching_keys():
    store = InMemoryStore({"simran_2026-10-20": True, "simran_2026-10-21": False, "paath_angs_2026-10-21": 3})
    assert store.remove_prefix("simran_") == 2
    assert store.keys() == ["paath_angs_2026-10-21"]


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "defaults.json"
    first = JsonFileStore(path)
    first.set("paath_start_date", date(2026, 10, 1))
    first.set("habit_config", b'{"x": 1}')
    first.set("simran_2026-10-21", True)

    second = JsonFileStore(path)
    assert second.get_date("paath_start_date") == date(2026, 10, 1)
    assert second.get_bytes("habit_config") == b'{"x": 1}'
    assert second.get_bool("simran_2026-10-21") is True

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["paath_start_date"] == {"__type__": "date", "value": "2026-10-01"}


def test_json_store_sees_writes_from_another_instance(tmp_path):
    path = tmp_path / "shared.json"
    app_side = JsonFileStore(path)
    widget_side = JsonFileStore(path)
    assert widget_side.get("simran_2026-10-21") is None

    app_side.set("simran_2026-10-21", True)
    assert widget_side.get_bool("simran_2026-10-21") is True

    app_side.set("paath_angs_2026-10-21", 9)
    # mtime может совпасть на грубых файловых системах
    widget_side._mtime = None
    assert widget_side.get_int("paath_angs_2026-10-21") == 9


def test_json_store_recovers_from_backup(tmp_path):
    path = tmp_path / "defaults.json"
    backups = BackupManager(tmp_path / "backups", max_backups=3)
    store = JsonFileStore(path, backups)
    store.set("paath_angs_2026-10-21", 7)
    assert store.create_backup() is not None

    path.write_text("{ not json", encoding="utf-8")
    restored = JsonFileStore(path, backups)
    assert restored.get_int("paath_angs_2026-10-21") == 7


def test_json_store_starts_empty_when_corrupted_without_backup(tmp_path):
    path = tmp_path / "defaults.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.keys() == []
    store.set("simran_2026-10-21", True)
    assert store.get_bool("simran_2026-10-21")


def test_backup_manager_keeps_max_backups(tmp_path):
    source = tmp_path / "defaults.json"
    source.write_text("{}", encoding="utf-8")
    manager = BackupManager(tmp_path / "backups", max_backups=2)
    for _ in range(4):
        manager.create_backup(source)
    assert len(manager.list_backups()) == 2


def test_json_store_unavailable_when_directory_cannot_exist(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "defaults.json")

    assert store.get("anything") is None
    with pytest.raises(StoreUnavailableError):
        store.set("simran_2026-10-21", True)


def test_fail_safe_store_degrades_to_defaults(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    store = FailSafeStore(JsonFileStore(blocker / "defaults.json"))

    store.set("simran_2026-10-21", True)
    store.remove("simran_2026-10-21")
    assert store.get_bool("simran_2026-10-21") is False
    assert store.get_int("paath_angs_2026-10-21") == 0
    assert store.remove_prefix("simran_") == 0
    assert store.is_available is False


def test_mirrored_store_fans_out_writes():
    primary, mirror = InMemoryStore(), InMemoryStore()
    store = MirroredStore(primary, mirror)

    store.set("paath_angs_2026-10-21", 4)
    assert primary.get_int("paath_angs_2026-10-21") == 4
    assert mirror.get_int("paath_angs_2026-10-21") == 4

    store.remove("paath_angs_2026-10-21")
    assert not mirror.contains("paath_angs_2026-10-21")


def test_mirrored_store_keeps_primary_write_when_mirror_fails(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    primary = InMemoryStore()
    store = MirroredStore(primary, JsonFileStore(blocker / "group.json"))

    store.set("simran_2026-10-21", True)
    assert primary.get_bool("simran_2026-10-21") is True


def test_undecodable_store_file_recovers_from_backup(tmp_path):
    path = tmp_path / "defaults.json"
    backups = BackupManager(tmp_path / "backups")
    store = JsonFileStore(path, backups)
    store.set("simran_2026-10-20", True)
    store.create_backup()

    path.write_bytes(b'{"simran_2026-10-21": \xff\xfe true}')
    restored = FailSafeStore(JsonFileStore(path, backups))
    assert restored.get_bool("simran_2026-10-21") is False
    assert restored.get_bool("simran_2026-10-20") is True


def test_undecodable_store_file_without_backup_starts_empty(tmp_path):
    path = tmp_path / "defaults.json"
    path.write_bytes(b'{"simran_2026-10-21": \xff\xfe true}')

    store = FailSafeStore(JsonFileStore(path))
    assert store.get_bool("simran_2026-10-21") is False
    assert store.keys() == []
    assert json.loads(path.read_text(encoding="utf-8")) == {"__store_version__": "1"}

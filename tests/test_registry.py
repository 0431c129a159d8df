import json

import pytest

from core.models import MORNING_SIMRAN_ID, SEHAJ_PAATH_ID, ValidationError
from core.registry import HABIT_CONFIG_KEY, HabitRegistry
from core.store import InMemoryStore


def test_defaults_are_saved_on_first_load(store):
    registry = HabitRegistry(store)
    assert [h.id for h in registry.habits] == [MORNING_SIMRAN_ID, SEHAJ_PAATH_ID]
    assert all(h.is_system for h in registry.habits)

    saved = json.loads(store.get_bytes(HABIT_CONFIG_KEY).decode("utf-8"))
    assert [item["id"] for item in saved] == [MORNING_SIMRAN_ID, SEHAJ_PAATH_ID]


def test_add_habit_persists(store):
    registry = HabitRegistry(store)
    habit = registry.add_habit("  Nitnem  ", "🙏")
    assert habit.name == "Nitnem"
    assert not habit.is_system

    reloaded = HabitRegistry(store)
    assert reloaded.get(habit.id).emoji == "🙏"


def test_add_habit_rejects_empty_name(store):
    registry = HabitRegistry(store)
    with pytest.raises(ValidationError):
        registry.add_habit("   ")


def test_move_habit(store):
    registry = HabitRegistry(store)
    extra = registry.add_habit("Nitnem")

    registry.move_habit([0], 2)
    assert [h.id for h in registry.habits] == [SEHAJ_PAATH_ID, MORNING_SIMRAN_ID, extra.id]

    registry.move_habit([2], 0)
    assert [h.id for h in registry.habits] == [extra.id, SEHAJ_PAATH_ID, MORNING_SIMRAN_ID]
    assert [h.id for h in HabitRegistry(store).habits] == [extra.id, SEHAJ_PAATH_ID, MORNING_SIMRAN_ID]

    with pytest.raises(IndexError):
        registry.move_habit([5], 0)


def test_toggle_visibility(store):
    registry = HabitRegistry(store)
    registry.toggle_visibility(SEHAJ_PAATH_ID)
    assert not registry.is_visible(SEHAJ_PAATH_ID)
    assert [h.id for h in registry.visible_habits()] == [MORNING_SIMRAN_ID]

    registry.toggle_visibility(SEHAJ_PAATH_ID)
    assert registry.is_visible(SEHAJ_PAATH_ID)


def test_system_habits_cannot_be_deleted(store):
    registry = HabitRegistry(store)
    extra = registry.add_habit("Nitnem")

    registry.delete_habit(MORNING_SIMRAN_ID)
    registry.delete_habit(extra.id)
    assert [h.id for h in registry.habits] == [MORNING_SIMRAN_ID, SEHAJ_PAATH_ID]


@pytest.mark.parametrize("blob", [b"not json", b'{"id": 1}', b'[{"name": "no id"}]'])
def test_unreadable_config_falls_back_to_defaults(blob):
    store = InMemoryStore({HABIT_CONFIG_KEY: blob})
    registry = HabitRegistry(store)
    assert [h.id for h in registry.habits] == [MORNING_SIMRAN_ID, SEHAJ_PAATH_ID]


def test_storage_prefix():
    assert HabitRegistry.storage_prefix(MORNING_SIMRAN_ID) == "simran"
    assert HabitRegistry.storage_prefix("abc") == "abc"


def test_delete_habit_removes_its_records(store):
    registry = HabitRegistry(store)
    extra = registry.add_habit("Nitnem")
    store.set(f"{extra.id}_2026-10-20", True)
    store.set(f"{extra.id}_2026-10-21", False)
    store.set("simran_2026-10-21", True)

    registry.delete_habit(extra.id)
    assert not any(key.startswith(extra.id) for key in store.keys())
    assert store.get_bool("simran_2026-10-21") is True


def test_deleting_system_habit_keeps_its_records(store):
    registry = HabitRegistry(store)
    store.set("simran_2026-10-21", True)
    registry.delete_habit(MORNING_SIMRAN_ID)
    assert store.get_bool("simran_2026-10-21") is True

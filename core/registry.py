# core/registry.py

"""
Реестр привычек: упорядоченный список определений, хранится JSON-блобом
под ключом habit_config.
"""

import json
import logging
from typing import Iterable, List, Optional

from core.models import Habit, MORNING_SIMRAN_ID, ValidationError
from core.store import KeyValueStore

logger = logging.getLogger(__name__)

HABIT_CONFIG_KEY = "habit_config"

# Системные привычки с историческим префиксом ключей
SYSTEM_PREFIXES = {
    MORNING_SIMRAN_ID: "simran",
}

def default_habits() -> List[Habit]:
    return [Habit.morning_simran(), Habit.sehaj_paath()]

class HabitRegistry:
    """Порядок, видимость и удаление привычек"""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.habits: List[Habit] = []
        self.load()

    def load(self) -> None:
        raw = self.store.get_bytes(HABIT_CONFIG_KEY)
        if raw is not None:
            try:
                items = json.loads(raw.decode("utf-8"))
                self.habits = [Habit.from_dict(item) for item in items]
                return
            except (ValueError, TypeError, ValidationError) as e:
                logger.warning(f"Habit config is unreadable, restoring defaults: {e}")

        self.habits = default_habits()
        self.save()

    def save(self) -> None:
        payload = json.dumps([h.to_dict() for h in self.habits], ensure_ascii=False)
        self.store.set(HABIT_CONFIG_KEY, payload.encode("utf-8"))

    # ===== MUTATIONS =====

    def add_habit(self, name: str, emoji: str = "") -> Habit:
        habit = Habit.create(name=name, emoji=emoji)
        self.habits.append(habit)
        self.save()
        logger.info(f"Habit added: {habit.name} ({habit.id})")
        return habit

    def move_habit(self, from_indices: Iterable[int], to_offset: int) -> None:
        """Переместить элементы с индексами from_indices перед позицией to_offset"""
        indices = sorted(set(from_indices))
        if not indices:
            return
        if indices[0] < 0 or indices[-1] >= len(self.habits):
            raise IndexError(f"Habit index out of range: {indices}")

        moved = [self.habits[i] for i in indices]
        remaining = [h for i, h in enumerate(self.habits) if i not in indices]
        insert_at = to_offset - sum(1 for i in indices if i < to_offset)
        insert_at = max(0, min(insert_at, len(remaining)))
        self.habits = remaining[:insert_at] + moved + remaining[insert_at:]
        self.save()

    def toggle_visibility(self, habit_id: str) -> None:
        habit = self.get(habit_id)
        if habit is None:
            return
        habit.is_visible = not habit.is_visible
        self.save()

    def delete_habit(self, habit_id: str) -> None:
        """Удаление пользовательской привычки вместе с её отметками; системные не удаляются"""
        before = len(self.habits)
        self.habits = [h for h in self.habits if h.id != habit_id or h.is_system]
        if len(self.habits) != before:
            self.save()
            removed = self.store.remove_prefix(f"{self.storage_prefix(habit_id)}_")
            logger.info(f"Habit deleted: {habit_id} ({removed} records removed)")

    # ===== QUERIES =====

    def get(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    def visible_habits(self) -> List[Habit]:
        return [h for h in self.habits if h.is_visible]

    def is_visible(self, habit_id: str) -> bool:
        habit = self.get(habit_id)
        return habit.is_visible if habit else False

    @staticmethod
    def storage_prefix(habit_id: str) -> str:
        return SYSTEM_PREFIXES.get(habit_id, habit_id)

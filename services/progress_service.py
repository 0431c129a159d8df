# services/progress_service.py

"""
Сервис прогресса: связывает реестр привычек с трекерами.

Обеспечивает:
- трекер для каждой привычки реестра (Сехадж Паатх - накопительный)
- общую серию Simran + Paath и дневные агрегаты по видимым привычкам
- полный сброс данных
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from config import ReadingConfig
from core.habit_tracker import BinaryHabitTracker
from core.models import CombinedDayRecord, DayAggregate, MORNING_SIMRAN_ID, SEHAJ_PAATH_ID
from core.reading_tracker import ReadingProgressTracker
from core.registry import HabitRegistry
from core.store import KeyValueStore
from core.streaks import CombinedStreakCalculator
from utils.datetime_utils import date_key, today_local

logger = logging.getLogger(__name__)

class ProgressService:
    """Точка входа UI, виджета и live activity в ядро"""

    def __init__(self, store: KeyValueStore, clock: Optional[Callable[[], date]] = None,
                 target_total: Optional[int] = None,
                 reading_config: Optional[ReadingConfig] = None):
        self.store = store
        self.clock = clock or today_local
        self.registry = HabitRegistry(store)
        self.reading = ReadingProgressTracker(
            store, target_total=target_total, clock=self.clock, reading_config=reading_config
        )
        self.simran = self.binary_tracker(MORNING_SIMRAN_ID)

    # ===== TRACKERS =====

    def binary_tracker(self, habit_id: str) -> BinaryHabitTracker:
        return BinaryHabitTracker(self.store, HabitRegistry.storage_prefix(habit_id), clock=self.clock)

    def tracker_for(self, habit_id: str):
        """Трекер привычки по id (для Сехадж Паатх - трекер чтения)"""
        if habit_id == SEHAJ_PAATH_ID:
            return self.reading
        if habit_id == MORNING_SIMRAN_ID:
            return self.simran
        return self.binary_tracker(habit_id)

    def visible_trackers(self) -> List:
        return [self.tracker_for(h.id) for h in self.registry.visible_habits()]

    # ===== STREAKS & AGGREGATES =====

    def core_calculator(self) -> CombinedStreakCalculator:
        """Simran + Paath: серия на главном экране, виджете и в календаре"""
        return CombinedStreakCalculator([self.simran, self.reading], clock=self.clock)

    def visible_calculator(self) -> CombinedStreakCalculator:
        return CombinedStreakCalculator(self.visible_trackers(), clock=self.clock)

    def combined_streak(self, as_of: Optional[date] = None) -> int:
        return self.core_calculator().streak(as_of)

    def day_overview(self, day: Optional[date] = None) -> Dict[str, bool]:
        """Выполнена ли каждая видимая привычка в этот день"""
        day = day or self.clock()
        return {
            habit.id: self.tracker_for(habit.id).completed_on(day)
            for habit in self.registry.visible_habits()
        }

    def day_aggregate(self, day: Optional[date] = None) -> DayAggregate:
        return self.visible_calculator().day_aggregate(day or self.clock())

    def month_overview(self, year: int, month: int) -> List[CombinedDayRecord]:
        return self.core_calculator().month_overview(year, month)

    # ===== RESET =====

    def reset_prefixes(self) -> List[str]:
        """Префиксы всех ключей с данными привычек"""
        prefixes = [
            f"{HabitRegistry.storage_prefix(h.id)}_"
            for h in self.registry.habits
            if h.id != SEHAJ_PAATH_ID
        ]
        prefixes.extend(self.reading.key_prefixes)
        return prefixes

    def reset_all_data(self) -> int:
        """Удалить все данные привычек и начать Сехадж Паатх заново с сегодня"""
        removed = 0
        for prefix in self.reset_prefixes():
            removed += self.store.remove_prefix(prefix)
        self.reading.reset_start_date()
        logger.info(f"All habit data reset: {removed} keys removed, new start {date_key(self.clock())}")
        return removed

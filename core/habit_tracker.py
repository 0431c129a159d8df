#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Binary Habit Tracker
Ежедневная привычка с ответом да / нет / без ответа

Версия: 1.0.0
Дата: 2026-10-19
"""

from datetime import date
from typing import Callable, List, Optional
import logging

from core.models import DayRecord, DayStatus
from core.store import KeyValueStore
from core.streaks import count_streak, longest_run
from utils.datetime_utils import (
    add_days, date_key, most_recent_sunday, parse_date_key, to_local_date, today_local
)
from utils.validators import is_valid_date_key

logger = logging.getLogger(__name__)

class BinaryHabitTracker:
    """Трекер привычки: ключи {prefix}_{YYYY-MM-DD} со значением bool.

    Без ответа = отсутствие ключа. Состояние не кэшируется, всё
    пересчитывается из хранилища.
    """

    def __init__(self, store: KeyValueStore, prefix: str = "simran",
                 clock: Optional[Callable[[], date]] = None):
        self.store = store
        self.prefix = prefix
        self.clock = clock or today_local

    @property
    def key_prefix(self) -> str:
        return f"{self.prefix}_"

    def key_for(self, day: date) -> str:
        return self.key_prefix + date_key(day)

    # ===== MUTATIONS =====

    def mark(self, day: date, completed: bool) -> None:
        """Отметить день выполненным или невыполненным"""
        self.store.set(self.key_for(day), bool(completed))
        logger.debug(f"{self.prefix}: marked {date_key(day)} as {'done' if completed else 'not done'}")

    def mark_today(self, completed: bool) -> None:
        self.mark(self.clock(), completed)

    def clear(self, day: date) -> None:
        """Вернуть день в состояние без ответа"""
        self.store.remove(self.key_for(day))
        logger.debug(f"{self.prefix}: cleared {date_key(day)}")

    def clear_today(self) -> None:
        self.clear(self.clock())

    # ===== QUERIES =====

    def status(self, day: date) -> DayStatus:
        value = self.store.get(self.key_for(day))
        if not isinstance(value, bool):
            value = None
        return DayStatus.from_stored(value)

    def is_done(self, day: date) -> bool:
        return self.status(day) == DayStatus.DONE

    def completed_on(self, day: date) -> bool:
        return self.is_done(day)

    def has_answered(self, day: date) -> bool:
        return self.status(day) != DayStatus.UNANSWERED

    def is_done_today(self) -> bool:
        return self.is_done(self.clock())

    def has_answered_today(self) -> bool:
        return self.has_answered(self.clock())

    def streak(self, as_of: Optional[date] = None) -> int:
        """Текущая серия: дни подряд назад от as_of (по умолчанию сегодня)"""
        return count_streak(self.is_done, to_local_date(as_of or self.clock()))

    def done_dates(self) -> List[date]:
        """Все дни со статусом DONE, найденные в хранилище"""
        dates = []
        for key in self.store.keys():
            if not key.startswith(self.key_prefix):
                continue
            suffix = key[len(self.key_prefix):]
            if not is_valid_date_key(suffix) or not self.store.get_bool(key):
                continue
            try:
                dates.append(parse_date_key(suffix))
            except ValueError:
                logger.warning(f"Ignoring malformed date key: {key}")
        return sorted(dates)

    def longest_streak(self) -> int:
        """Самая длинная серия за всю историю"""
        return longest_run(self.done_dates())

    def week_window(self, reference_date: Optional[date] = None) -> List[DayRecord]:
        """Неделя с воскресенья, содержащего reference_date"""
        sunday = most_recent_sunday(to_local_date(reference_date or self.clock()))
        return self.history(sunday, add_days(sunday, 6))

    def history(self, start: date, end: date) -> List[DayRecord]:
        """Записи за период [start, end] по возрастанию"""
        records = []
        current_date, end = to_local_date(start), to_local_date(end)
        while current_date <= end:
            records.append(DayRecord(date=current_date, status=self.status(current_date)))
            current_date = add_days(current_date, 1)
        return records

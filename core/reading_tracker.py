#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Sehaj Paath Progress Tracker
Накопительный прогресс чтения: анги за день, итог, темп и прогноз

Версия: 1.0.0
Дата: 2026-10-19
"""

import math
from datetime import date, datetime
from typing import Callable, List, Optional, Union
import logging

from config import config, ReadingConfig
from core.models import InvalidArgumentError, ProgressSummary, ReadingDayRecord, validate_count
from core.store import KeyValueStore
from core.streaks import count_streak
from utils.datetime_utils import (
    add_days, date_key, days_between, most_recent_sunday, to_local_date, today_local
)

logger = logging.getLogger(__name__)

class ReadingProgressTracker:
    """Трекер Сехадж Паатх.

    В хранилище лежит дневная дельта (paath_angs_{день}), а не накопленный
    итог. Итог на дату - сумма дельт от даты начала включительно.
    Флаг paath_completed_{день} ставится при любой положительной дельте и
    больше не снимается: правка дельты до нуля его не сбрасывает.
    """

    def __init__(self, store: KeyValueStore, target_total: Optional[int] = None,
                 clock: Optional[Callable[[], date]] = None,
                 reading_config: Optional[ReadingConfig] = None):
        self.store = store
        self.settings = reading_config or config.reading
        self.target_total = self.settings.total_angs if target_total is None else target_total
        self.clock = clock or today_local

        if isinstance(self.target_total, bool) or not isinstance(self.target_total, int) or self.target_total <= 0:
            raise InvalidArgumentError(f"target_total должен быть положительным целым, получено {self.target_total!r}")

        self.ensure_start_date()

    # ===== KEYS =====

    def angs_key(self, day: date) -> str:
        return self.settings.angs_prefix + date_key(day)

    def completed_key(self, day: date) -> str:
        return self.settings.completed_prefix + date_key(day)

    @property
    def key_prefixes(self) -> List[str]:
        """Все префиксы ключей, принадлежащих трекеру"""
        return [
            self.settings.angs_prefix,
            self.settings.completed_prefix,
            self.settings.start_date_key,
            self.settings.target_date_key,
        ]

    # ===== START / TARGET DATES =====

    def ensure_start_date(self) -> None:
        """Дата начала пишется один раз, при первом использовании"""
        if not self.store.contains(self.settings.start_date_key):
            self.reset_start_date()

    def reset_start_date(self, day: Optional[date] = None) -> None:
        day = to_local_date(day or self.clock())
        self.store.set(self.settings.start_date_key, day)
        logger.info(f"Sehaj Paath start date set to {date_key(day)}")

    @property
    def start_date(self) -> Optional[date]:
        return self.store.get_date(self.settings.start_date_key)

    @property
    def target_date(self) -> Optional[date]:
        return self.store.get_date(self.settings.target_date_key)

    @target_date.setter
    def target_date(self, value: Optional[Union[date, datetime]]) -> None:
        if value is None:
            self.store.remove(self.settings.target_date_key)
            logger.info("Sehaj Paath target date cleared")
        else:
            value = to_local_date(value)
            self.store.set(self.settings.target_date_key, value)
            logger.info(f"Sehaj Paath target date set to {date_key(value)}")

    # ===== DAILY DELTAS =====

    def set_daily_delta(self, day: date, count: int) -> None:
        """Записать количество ангов за день (перезапись, не прибавление)"""
        day = to_local_date(day)
        validate_count(count, field_name="angs")
        self.store.set(self.angs_key(day), count)
        if count > 0:
            self.store.set(self.completed_key(day), True)
        logger.debug(f"Sehaj Paath: {count} angs on {date_key(day)}")

    def set_today(self, count: int) -> None:
        self.set_daily_delta(self.clock(), count)

    def daily_delta(self, day: date) -> int:
        return self.store.get_int(self.angs_key(day))

    def today_delta(self) -> int:
        return self.daily_delta(self.clock())

    def did_complete(self, day: date) -> bool:
        return self.store.get_bool(self.completed_key(day))

    def completed_on(self, day: date) -> bool:
        return self.did_complete(day)

    # ===== DERIVED PROGRESS =====

    def total_to_date(self, as_of: Optional[date] = None) -> int:
        """Сумма дельт от даты начала до as_of включительно"""
        as_of = to_local_date(as_of or self.clock())
        start = self.start_date
        if start is None or as_of < start:
            return 0

        total = 0
        current_date = start
        while current_date <= as_of:
            total += self.daily_delta(current_date)
            current_date = add_days(current_date, 1)
        return total

    def percent_complete(self, as_of: Optional[date] = None) -> float:
        return 100.0 * self.total_to_date(as_of) / self.target_total

    def days_elapsed(self, as_of: Optional[date] = None) -> int:
        """Дней с начала, включая день начала и as_of"""
        start = self.start_date
        if start is None:
            return 1
        return max(1, days_between(start, to_local_date(as_of or self.clock())) + 1)

    def daily_average(self, as_of: Optional[date] = None) -> float:
        as_of = to_local_date(as_of or self.clock())
        return self.total_to_date(as_of) / self.days_elapsed(as_of)

    def estimated_completion_date(self, as_of: Optional[date] = None) -> Optional[date]:
        """Прогноз окончания при текущем среднем темпе"""
        as_of = to_local_date(as_of or self.clock())
        average = self.daily_average(as_of)
        if average <= 0:
            return None

        remaining = self.target_total - self.total_to_date(as_of)
        days_remaining = max(0, math.ceil(remaining / average))
        return add_days(as_of, days_remaining)

    def required_daily_pace(self, target_date: Optional[date] = None,
                            as_of: Optional[date] = None) -> Optional[float]:
        """Сколько ангов в день нужно до целевой даты.

        Не ограничено снизу: после достижения цели значение отрицательное.
        """
        target = target_date or self.target_date
        if target is None:
            return None

        as_of = to_local_date(as_of or self.clock())
        remaining = self.target_total - self.total_to_date(as_of)
        days_until_target = max(1, days_between(as_of, to_local_date(target)))
        return remaining / days_until_target

    def combined_streak(self, other, as_of: Optional[date] = None) -> int:
        """Серия дней, когда выполнены и чтение, и другая привычка"""
        return count_streak(
            lambda day: self.did_complete(day) and other.is_done(day),
            to_local_date(as_of or self.clock())
        )

    def week_window(self, reference_date: Optional[date] = None) -> List[ReadingDayRecord]:
        """Неделя с воскресенья; день выполнен, если анги > 0"""
        sunday = most_recent_sunday(to_local_date(reference_date or self.clock()))
        return self.history(sunday, add_days(sunday, 6))

    def history(self, start: date, end: date) -> List[ReadingDayRecord]:
        records = []
        current_date, end = to_local_date(start), to_local_date(end)
        while current_date <= end:
            records.append(ReadingDayRecord(date=current_date, angs=self.daily_delta(current_date)))
            current_date = add_days(current_date, 1)
        return records

    def summary(self, as_of: Optional[date] = None) -> ProgressSummary:
        as_of = to_local_date(as_of or self.clock())
        target = self.target_date
        return ProgressSummary(
            as_of=as_of,
            start_date=self.start_date,
            total_read=self.total_to_date(as_of),
            target_total=self.target_total,
            percent_complete=self.percent_complete(as_of),
            daily_average=self.daily_average(as_of),
            estimated_completion_date=self.estimated_completion_date(as_of),
            target_date=target,
            required_daily_pace=self.required_daily_pace(target, as_of)
        )

# core/streaks.py

"""
Серии дней и агрегаты по нескольким привычкам.

Любой трекер, у которого есть completed_on(date) -> bool, может участвовать
в общей серии: бинарная привычка отвечает is_done, Сехадж Паатх -
флагом did_complete.
"""

import calendar
from datetime import date
from typing import Callable, List, Optional, Sequence

from core.models import CombinedDayRecord, DayAggregate
from utils.datetime_utils import add_days, to_local_date, today_local

def count_streak(predicate: Callable[[date], bool], start: date) -> int:
    """Сколько дней подряд, начиная со start и назад, выполнено условие"""
    streak = 0
    current_date = start
    while predicate(current_date):
        streak += 1
        current_date = add_days(current_date, -1)
    return streak

def longest_run(dates) -> int:
    """Самая длинная серия последовательных дат"""
    ordered = sorted(set(dates))
    if not ordered:
        return 0

    max_streak = 1
    current_streak = 1
    for i in range(1, len(ordered)):
        if ordered[i] == add_days(ordered[i - 1], 1):
            current_streak += 1
            max_streak = max(max_streak, current_streak)
        else:
            current_streak = 1
    return max_streak

class CombinedStreakCalculator:
    """Общая серия и дневные агрегаты для набора трекеров"""

    def __init__(self, trackers: Sequence, clock: Optional[Callable[[], date]] = None):
        self.trackers = list(trackers)
        self.clock = clock or today_local

    def all_completed(self, day: date) -> bool:
        return bool(self.trackers) and all(t.completed_on(day) for t in self.trackers)

    def day_aggregate(self, day: date) -> DayAggregate:
        done = [t.completed_on(day) for t in self.trackers]
        if done and all(done):
            return DayAggregate.ALL
        if any(done):
            return DayAggregate.SOME
        return DayAggregate.NONE

    def streak(self, as_of: Optional[date] = None) -> int:
        return count_streak(self.all_completed, to_local_date(as_of or self.clock()))

    def last_seven_days(self, as_of: Optional[date] = None) -> List[CombinedDayRecord]:
        """Скользящие 7 дней, заканчивая as_of, по возрастанию"""
        end = to_local_date(as_of or self.clock())
        return [
            CombinedDayRecord(date=day, aggregate=self.day_aggregate(day))
            for day in (add_days(end, -offset) for offset in range(6, -1, -1))
        ]

    def month_overview(self, year: int, month: int) -> List[CombinedDayRecord]:
        _, days_in_month = calendar.monthrange(year, month)
        return [
            CombinedDayRecord(date=day, aggregate=self.day_aggregate(day))
            for day in (date(year, month, n) for n in range(1, days_in_month + 1))
        ]

# services/widget_service.py

"""
Снимок для виджета домашнего экрана.

Виджет читает общее (зеркальное) хранилище и пересчитывает всё по
расписанию, через те же трекеры, что и приложение.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field

from config import config, WidgetConfig
from services.progress_service import ProgressService
from utils.datetime_utils import add_days, local_tz, most_recent_sunday, next_local_midnight, now_local

logger = logging.getLogger(__name__)

class WidgetEntry(BaseModel):
    entry_date: date
    simran_done: bool = False
    paath_angs: int = Field(0, ge=0)
    streak: int = Field(0, ge=0)
    week_progress: List[bool] = Field(default_factory=lambda: [False] * 7, min_length=7, max_length=7)
    next_refresh: Optional[datetime] = None

    @classmethod
    def placeholder(cls, entry_date: date) -> "WidgetEntry":
        return cls(entry_date=entry_date)

class WidgetService:
    """Построение записи таймлайна виджета"""

    def __init__(self, progress: ProgressService, widget_config: Optional[WidgetConfig] = None):
        self.progress = progress
        self.settings = widget_config or config.widget

    def next_refresh(self, now: datetime) -> datetime:
        """Раньшее из: now + интервал, ближайшая локальная полночь"""
        if now.tzinfo is None:
            now = local_tz().localize(now)
        candidate = now + timedelta(minutes=self.settings.refresh_minutes)
        if self.settings.refresh_at_midnight:
            candidate = min(candidate, next_local_midnight(now))
        return candidate

    def week_progress(self, reference_date: date) -> List[bool]:
        calculator = self.progress.core_calculator()
        sunday = most_recent_sunday(reference_date)
        return [calculator.all_completed(add_days(sunday, i)) for i in range(7)]

    def build_entry(self, now: Optional[datetime] = None) -> WidgetEntry:
        now = now or now_local()
        today = self.progress.clock()
        entry = WidgetEntry(
            entry_date=today,
            simran_done=self.progress.simran.is_done(today),
            paath_angs=self.progress.reading.daily_delta(today),
            streak=self.progress.combined_streak(today),
            week_progress=self.week_progress(today),
            next_refresh=self.next_refresh(now)
        )
        logger.debug(f"Widget entry built for {today}: streak={entry.streak}")
        return entry

# services/scheduler.py

"""
Периодический пересчёт снимков виджета и live activity.

Обновление только по расписанию (каждые N минут и в локальную полночь),
без подписки на изменения хранилища.
"""

import logging
from typing import Callable, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config import config
from core.store import KeyValueStore
from services.widget_service import WidgetEntry, WidgetService

logger = logging.getLogger(__name__)

class RefreshScheduler:
    """Планировщик обновления таймлайна виджета"""

    def __init__(self, widget_service: WidgetService, store: Optional[KeyValueStore] = None,
                 scheduler: Optional[BackgroundScheduler] = None, app_config=None):
        self.widget_service = widget_service
        self.store = store
        self.config = app_config or config
        self.scheduler = scheduler or BackgroundScheduler(timezone=self.config.timezone)
        self.latest_entry: Optional[WidgetEntry] = None
        self.listeners: List[Callable[[WidgetEntry], None]] = []

    def add_listener(self, callback: Callable[[WidgetEntry], None]) -> None:
        self.listeners.append(callback)

    def refresh(self) -> WidgetEntry:
        """Пересчитать запись виджета и оповестить слушателей"""
        entry = self.widget_service.build_entry()
        self.latest_entry = entry
        for callback in self.listeners:
            try:
                callback(entry)
            except Exception as e:
                logger.error(f"Widget refresh listener failed: {e}")
        logger.info(f"Widget refreshed: streak={entry.streak}, next refresh {entry.next_refresh}")
        return entry

    def backup(self) -> None:
        if self.store is None:
            return
        path = self.store.create_backup()
        if path:
            logger.info(f"Periodic backup completed: {path}")

    def setup_jobs(self) -> None:
        self.scheduler.add_job(
            self.refresh,
            IntervalTrigger(minutes=self.config.widget.refresh_minutes),
            id='widget_refresh',
            replace_existing=True
        )

        if self.config.widget.refresh_at_midnight:
            self.scheduler.add_job(
                self.refresh,
                CronTrigger(hour=0, minute=0),
                id='widget_midnight_refresh',
                replace_existing=True
            )

        if self.store is not None and self.config.storage.auto_backup:
            self.scheduler.add_job(
                self.backup,
                CronTrigger(hour=3, minute=0),
                id='daily_backup',
                replace_existing=True
            )

    def start(self) -> None:
        self.setup_jobs()
        self.refresh()
        self.scheduler.start()
        logger.info("Refresh scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Refresh scheduler stopped")

# services/__init__.py

"""
Модуль сервисов Daya Tracker

Этот модуль содержит сервисы поверх ядра: прогресс, виджет, live activity,
планировщик обновлений и экспорт.
"""

from .progress_service import ProgressService
from .widget_service import WidgetEntry, WidgetService
from .live_activity import LiveActivityState, LiveActivityService

__all__ = [
    'ProgressService',
    'WidgetEntry',
    'WidgetService',
    'LiveActivityState',
    'LiveActivityService'
]

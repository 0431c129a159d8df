#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Core Package
Хранилище, трекеры привычек и расчёт серий

Версия: 1.0.0
Дата: 2026-10-19
"""

from .models import (
    DayStatus,
    DayAggregate,
    DayRecord,
    ReadingDayRecord,
    CombinedDayRecord,
    Habit,
    ProgressSummary,
    ValidationError,
    InvalidArgumentError
)

from .store import (
    KeyValueStore,
    InMemoryStore,
    JsonFileStore,
    MirroredStore,
    FailSafeStore,
    StoreError,
    StoreUnavailableError,
    StoreCorruptionError,
    open_default_store
)

from .habit_tracker import BinaryHabitTracker
from .reading_tracker import ReadingProgressTracker
from .streaks import CombinedStreakCalculator, count_streak
from .registry import HabitRegistry

__all__ = [
    # Models
    'DayStatus',
    'DayAggregate',
    'DayRecord',
    'ReadingDayRecord',
    'CombinedDayRecord',
    'Habit',
    'ProgressSummary',
    'ValidationError',
    'InvalidArgumentError',

    # Store
    'KeyValueStore',
    'InMemoryStore',
    'JsonFileStore',
    'MirroredStore',
    'FailSafeStore',
    'StoreError',
    'StoreUnavailableError',
    'StoreCorruptionError',
    'open_default_store',

    # Trackers
    'BinaryHabitTracker',
    'ReadingProgressTracker',
    'CombinedStreakCalculator',
    'count_streak',
    'HabitRegistry'
]

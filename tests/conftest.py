import os
from datetime import date

import pytest

# Календарные дни в тестах считаются в UTC, независимо от пояса машины
os.environ["TIMEZONE"] = "UTC"

from core.habit_tracker import BinaryHabitTracker
from core.reading_tracker import ReadingProgressTracker
from core.store import InMemoryStore
from services.progress_service import ProgressService

# Среда, 21 октября 2026; ближайшее воскресенье - 18 октября
TODAY = date(2026, 10, 21)


class FixedClock:
    def __init__(self, today: date = TODAY):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def simran(store, clock):
    return BinaryHabitTracker(store, "simran", clock=clock)


@pytest.fixture
def reading(store, clock):
    return ReadingProgressTracker(store, target_total=1430, clock=clock)


@pytest.fixture
def progress(store, clock):
    return ProgressService(store, clock=clock, target_total=1430)

from datetime import date, timedelta

from core.models import DayStatus
from tests.conftest import TODAY


def test_unanswered_by_default(simran):
    assert simran.status(TODAY) == DayStatus.UNANSWERED
    assert not simran.has_answered_today()
    assert not simran.is_done_today()


def test_mark_and_clear(simran, store):
    simran.mark_today(True)
    assert simran.status(TODAY) == DayStatus.DONE
    assert store.get("simran_2026-10-21") is True

    simran.mark_today(False)
    assert simran.status(TODAY) == DayStatus.NOT_DONE
    assert simran.has_answered_today()

    simran.clear_today()
    assert simran.status(TODAY) == DayStatus.UNANSWERED
    assert "simran_2026-10-21" not in store.keys()


def test_marking_twice_is_idempotent(simran, store):
    simran.mark(TODAY, True)
    simran.mark(TODAY, True)
    assert store.keys() == ["simran_2026-10-21"]
    assert simran.streak() == 1


def test_streak_counts_back_from_today(simran):
    for offset in range(3):
        simran.mark(TODAY - timedelta(days=offset), True)
    simran.mark(TODAY - timedelta(days=4), True)
    assert simran.streak() == 3


def test_streak_is_zero_when_today_not_done(simran):
    simran.mark(TODAY - timedelta(days=1), True)
    simran.mark(TODAY - timedelta(days=2), True)
    assert simran.streak() == 0
    assert simran.streak(as_of=TODAY - timedelta(days=1)) == 2


def test_not_done_breaks_streak(simran):
    simran.mark(TODAY, True)
    simran.mark(TODAY - timedelta(days=1), False)
    simran.mark(TODAY - timedelta(days=2), True)
    assert simran.streak() == 1


def test_longest_streak_ignores_foreign_and_malformed_keys(simran, store):
    for day in (1, 2, 3, 4, 10, 11):
        simran.mark(date(2026, 10, day), True)
    simran.mark(date(2026, 10, 5), False)
    store.set("simran_not-a-date", True)
    store.set("simran_2026-02-30", True)
    store.set("meditation_2026-10-06", True)

    assert simran.longest_streak() == 4


def test_week_window_starts_on_sunday(simran):
    simran.mark(date(2026, 10, 18), True)
    simran.mark(date(2026, 10, 20), False)

    week = simran.week_window()
    assert [r.date for r in week] == [date(2026, 10, 18) + timedelta(days=i) for i in range(7)]
    assert week[0].day_label == "Sun"
    assert [r.status for r in week[:3]] == [DayStatus.DONE, DayStatus.UNANSWERED, DayStatus.NOT_DONE]
    assert week[0].completed is True
    assert week[1].completed is None


def test_week_window_for_reference_date(simran):
    week = simran.week_window(date(2026, 10, 17))
    assert week[0].date == date(2026, 10, 11)
    assert week[-1].date == date(2026, 10, 17)


def test_other_prefixes_are_independent(store, clock):
    from core.habit_tracker import BinaryHabitTracker

    meditation = BinaryHabitTracker(store, "meditation", clock=clock)
    simran = BinaryHabitTracker(store, "simran", clock=clock)
    meditation.mark_today(True)
    assert meditation.is_done_today()
    assert not simran.has_answered_today()


def test_clear_twice_is_idempotent(simran, store):
    day = TODAY - timedelta(days=3)
    simran.mark(day, False)
    simran.mark(TODAY, True)

    simran.clear(day)
    assert simran.status(day) == DayStatus.UNANSWERED
    assert store.keys() == ["simran_2026-10-21"]

    simran.clear(day)
    assert simran.status(day) == DayStatus.UNANSWERED
    assert store.keys() == ["simran_2026-10-21"]
    assert simran.is_done_today()

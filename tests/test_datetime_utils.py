from datetime import date, datetime

import pytz

from utils.datetime_utils import (
    date_key, days_between, most_recent_sunday, next_local_midnight, parse_date_key, weekday_label
)


def test_same_local_day_gives_same_key():
    morning = datetime(2026, 10, 21, 0, 0, 1)
    night = datetime(2026, 10, 21, 23, 59, 59)
    assert date_key(morning) == date_key(night) == date_key(date(2026, 10, 21)) == "2026-10-21"


def test_aware_datetime_uses_local_calendar_day():
    kolkata = pytz.timezone("Asia/Kolkata")
    late_utc = pytz.utc.localize(datetime(2026, 10, 20, 20, 0))
    assert date_key(late_utc, tz=kolkata) == "2026-10-21"
    assert date_key(late_utc, tz=pytz.utc) == "2026-10-20"


def test_parse_date_key_round_trip():
    assert parse_date_key("2026-02-28") == date(2026, 2, 28)


def test_most_recent_sunday():
    assert most_recent_sunday(date(2026, 10, 21)) == date(2026, 10, 18)
    assert most_recent_sunday(date(2026, 10, 18)) == date(2026, 10, 18)
    assert most_recent_sunday(date(2026, 10, 17)) == date(2026, 10, 11)


def test_weekday_label():
    assert weekday_label(date(2026, 10, 18)) == "Sun"
    assert weekday_label(date(2026, 10, 21)) == "Wed"


def test_days_between_counts_calendar_days():
    assert days_between(date(2026, 10, 1), date(2026, 10, 21)) == 20
    assert days_between(date(2026, 10, 21), date(2026, 10, 1)) == -20


def test_next_local_midnight():
    tz = pytz.timezone("Europe/London")
    now = tz.localize(datetime(2026, 10, 21, 18, 30))
    midnight = next_local_midnight(now, tz=tz)
    assert midnight.date() == date(2026, 10, 22)
    assert (midnight.hour, midnight.minute) == (0, 0)

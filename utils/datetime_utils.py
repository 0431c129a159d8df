# utils/datetime_utils.py

from datetime import datetime, date, time, timedelta
from typing import Union

from config import config

DATE_KEY_FORMAT = "%Y-%m-%d"
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

def local_tz(tz=None):
    return tz or config.timezone

def now_local(tz=None) -> datetime:
    return datetime.now(local_tz(tz))

def today_local(tz=None) -> date:
    return now_local(tz).date()

def to_local_date(value: Union[date, datetime], tz=None) -> date:
    """Календарный день в локальном часовом поясе.

    Aware datetime переводится в локальный пояс, naive считается уже локальным.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(local_tz(tz))
        return value.date()
    return value

def date_key(value: Union[date, datetime], tz=None) -> str:
    return to_local_date(value, tz).strftime(DATE_KEY_FORMAT)

def parse_date_key(date_str: str) -> date:
    return datetime.strptime(date_str, DATE_KEY_FORMAT).date()

def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)

def days_between(start: date, end: date) -> int:
    return (end - start).days

def most_recent_sunday(d: date) -> date:
    # weekday(): понедельник = 0, воскресенье = 6
    return d - timedelta(days=(d.weekday() + 1) % 7)

def weekday_label(d: date) -> str:
    return WEEKDAY_LABELS[d.weekday()]

def format_date(d: date, fmt: str = "%b %d, %Y") -> str:
    return d.strftime(fmt)

def next_local_midnight(now: datetime, tz=None) -> datetime:
    tz = local_tz(tz)
    if now.tzinfo is None:
        now = tz.localize(now)
    else:
        now = now.astimezone(tz)
    tomorrow = now.date() + timedelta(days=1)
    return tz.localize(datetime.combine(tomorrow, time.min))

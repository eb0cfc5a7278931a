"""
Local-time helpers.

All wall-clock values (work dates, check-in times, OT windows) are interpreted
in the configured business timezone, not UTC. Naive datetimes, including the
ones SQLite hands back, are assumed to already be local.
"""
from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Union
from zoneinfo import ZoneInfo

from app.core.config import settings


@lru_cache(maxsize=1)
def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def now_local() -> datetime:
    return datetime.now(timezone.utc).astimezone(local_tz())


def today_local() -> date:
    return now_local().date()


def ensure_local(value: Union[str, datetime]) -> datetime:
    """Parse ISO strings and pin naive datetimes to the local timezone."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=local_tz())
    return value.astimezone(local_tz())


def parse_hhmm(value: str) -> time:
    hours, minutes = value.strip().split(":")[:2]
    return time(int(hours), int(minutes))


def build_local_datetime(day: Union[str, date], hhmm: str) -> datetime:
    """Combine a calendar day and an "HH:MM" wall-clock time in local time."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return datetime.combine(day, parse_hhmm(hhmm), tzinfo=local_tz())

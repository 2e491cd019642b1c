# backend/core/clock.py

"""
Time source and timezone helpers.

Instants are handled as naive UTC datetimes throughout the backend. Opening
hours and calendar days are evaluated in the restaurant's local timezone.
"""

from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ConfigurationError


def get_zone(tz_name: str) -> tzinfo:
    """Resolve an IANA timezone name"""
    if not tz_name or tz_name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(f"Unknown restaurant timezone '{tz_name}'")


def to_utc(dt: datetime) -> datetime:
    """Converts a datetime to naive UTC; naive input is assumed to be UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


class Clock:
    """Supplies "now" and restaurant-local time-of-day views of instants"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def to_utc(self, dt: datetime) -> datetime:
        return to_utc(dt)

    def to_local(self, instant: datetime, tz_name: str) -> datetime:
        return to_utc(instant).replace(tzinfo=timezone.utc).astimezone(get_zone(tz_name))

    def local_time_of_day(self, instant: datetime, tz_name: str) -> time:
        """Hour and minute of the instant on the restaurant's wall clock"""
        local = self.to_local(instant, tz_name)
        return time(local.hour, local.minute)

    def local_day_bounds(self, instant: datetime, tz_name: str) -> Tuple[datetime, datetime]:
        """UTC bounds [start, end) of the restaurant-local calendar day containing the instant"""
        zone = get_zone(tz_name)
        local_day = self.to_local(instant, tz_name).date()
        start = datetime.combine(local_day, time(0, 0), tzinfo=zone)
        end = datetime.combine(local_day + timedelta(days=1), time(0, 0), tzinfo=zone)
        return to_utc(start), to_utc(end)


class FixedClock(Clock):
    """Clock pinned to a given instant"""

    def __init__(self, current: datetime):
        self.current = to_utc(current)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


# Shared default clock
system_clock = Clock()

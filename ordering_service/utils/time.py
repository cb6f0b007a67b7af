"""Wall-clock helpers for ordering windows and branch-local time.

All interval checks work on minutes since midnight. Windows never cross
midnight: a window whose start is not before its end is a configuration
error and is reported instead of being wrapped.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from ordering_service.core.errors import ConfigurationInvalidError
from ordering_service.schemas.ordering_times import TimeWindow

MINUTES_PER_DAY: int = 24 * 60


def minutes_since_midnight(value: time | datetime) -> int:
    """Return 0-1439 for a wall-clock time or the time part of a datetime."""
    return value.hour * 60 + value.minute


def _window_bounds(window: TimeWindow) -> tuple[int, int]:
    start = minutes_since_midnight(window.start)
    end = minutes_since_midnight(window.end)
    if start >= end:
        raise ConfigurationInvalidError(
            f"ordering window {window.start:%H:%M}-{window.end:%H:%M} does not start before it ends"
        )
    return start, end


def is_within(window: TimeWindow, instant: time | datetime) -> bool:
    """Return True when instant falls in the half-open window [start, end)."""
    start, end = _window_bounds(window)
    return start <= minutes_since_midnight(instant) < end


def add_minutes(value: time | datetime, lead: int) -> time:
    """Add a lead time, wrapping past midnight.

    The result is for display only and must not be used for window checks.
    """
    total = (minutes_since_midnight(value) + lead) % MINUTES_PER_DAY
    return time(hour=total // 60, minute=total % 60)


def next_boundary(window: TimeWindow, instant: time | datetime) -> time | None:
    """Return the earliest orderable time today, or None once the window has ended."""
    start, end = _window_bounds(window)
    current = minutes_since_midnight(instant)
    if current < start:
        return window.start
    if current < end:
        return time(hour=current // 60, minute=current % 60)
    return None


def at_time(day: date, value: time) -> datetime:
    """Combine a calendar date and a wall-clock time into a naive local datetime."""
    return datetime.combine(day, value)


def to_branch_local(instant: datetime, tz_name: str) -> datetime:
    """Return a naive branch-local datetime.

    Naive input is taken to already be branch-local.
    """
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def branch_local_to_utc(local: datetime, tz_name: str) -> datetime:
    """Return the UTC instant for a naive branch-local datetime."""
    return local.replace(tzinfo=ZoneInfo(tz_name)).astimezone(timezone.utc)


def utc_to_branch_local(instant: datetime, tz_name: str) -> datetime:
    """Return a naive branch-local datetime for a stored UTC timestamp.

    SQLite returns naive values for timezone-aware columns; those are UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def branch_now(tz_name: str) -> datetime:
    """Return the current naive wall-clock time of a branch."""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)

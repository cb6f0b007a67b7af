"""Schedule-based availability for a branch and service type.

Checks run in a fixed order: closed dates, then the weekday's service switch,
then the break window, then the ordering window boundaries. A later check can
never make an earlier refusal available.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from ordering_service.core.config import settings
from ordering_service.schemas.availability import AvailabilityReason, AvailabilityResult
from ordering_service.schemas.closed_dates import ClosedDate, is_closed_on
from ordering_service.schemas.ordering_times import DaySettings, ServiceType, WeeklySchedule
from ordering_service.utils.time import add_minutes, at_time, is_within, minutes_since_midnight, next_boundary

logger = logging.getLogger(__name__)


def first_orderable_time(day_settings: DaySettings, service_type: ServiceType) -> time | None:
    """Return the first time on a day when orders open, skipping a break at the window start."""
    window = day_settings.effective_window(service_type)
    opening: time = window.start
    if day_settings.break_window is not None and is_within(day_settings.break_window, opening):
        return next_boundary(window, day_settings.break_window.end)
    return opening


def next_open_instant(
    schedule: WeeklySchedule,
    closed_dates: list[ClosedDate],
    service_type: ServiceType,
    after_day: date,
    max_scan_days: int | None = None,
) -> datetime | None:
    """Scan the days following after_day for the next opening.

    The scan is bounded so a branch closed for good still terminates.
    """
    limit = max_scan_days if max_scan_days is not None else settings.max_scan_days
    for offset in range(1, limit + 1):
        day = after_day + timedelta(days=offset)
        if is_closed_on(closed_dates, day) is not None:
            continue
        day_settings = schedule.for_date(day)
        if not day_settings.is_allowed(service_type):
            continue
        opening = first_orderable_time(day_settings, service_type)
        if opening is not None:
            return at_time(day, opening)
    return None


def _refuse_until_later_day(
    reason: AvailabilityReason,
    schedule: WeeklySchedule,
    closed_dates: list[ClosedDate],
    service_type: ServiceType,
    today: date,
    max_scan_days: int | None,
) -> AvailabilityResult:
    next_instant = next_open_instant(schedule, closed_dates, service_type, today, max_scan_days)
    if next_instant is None:
        return AvailabilityResult(available=False, reason=AvailabilityReason.NO_UPCOMING_SLOT)
    return AvailabilityResult(available=False, reason=reason, next_available_instant=next_instant)


def evaluate_schedule(
    schedule: WeeklySchedule,
    closed_dates: list[ClosedDate],
    service_type: ServiceType,
    now: datetime,
    *,
    max_scan_days: int | None = None,
) -> AvailabilityResult:
    """Return the schedule verdict for a branch-local instant."""
    today: date = now.date()

    closure = is_closed_on(closed_dates, today)
    if closure is not None:
        logger.debug("[AVAILABILITY] %s closed on %s (%s)", service_type.value, today, closure.reason)
        return _refuse_until_later_day(
            AvailabilityReason.CLOSED_DATE, schedule, closed_dates, service_type, today, max_scan_days
        )

    day_settings = schedule.for_date(today)
    if not day_settings.is_allowed(service_type):
        return _refuse_until_later_day(
            AvailabilityReason.SERVICE_TYPE_DISABLED_FOR_DAY, schedule, closed_dates, service_type, today, max_scan_days
        )

    window = day_settings.effective_window(service_type)
    break_window = day_settings.break_window
    if break_window is not None and is_within(break_window, now):
        resume = next_boundary(window, break_window.end)
        if resume is None:
            return _refuse_until_later_day(
                AvailabilityReason.ON_BREAK, schedule, closed_dates, service_type, today, max_scan_days
            )
        return AvailabilityResult(
            available=False,
            reason=AvailabilityReason.ON_BREAK,
            next_available_instant=at_time(today, resume),
        )

    boundary = next_boundary(window, now)
    if boundary is None:
        # Closed for the rest of today; report the next opening on a later day.
        return _refuse_until_later_day(
            AvailabilityReason.NOT_YET_OPEN, schedule, closed_dates, service_type, today, max_scan_days
        )
    if minutes_since_midnight(now) < minutes_since_midnight(window.start):
        opening = first_orderable_time(day_settings, service_type)
        if opening is None:
            return _refuse_until_later_day(
                AvailabilityReason.NOT_YET_OPEN, schedule, closed_dates, service_type, today, max_scan_days
            )
        return AvailabilityResult(
            available=False,
            reason=AvailabilityReason.NOT_YET_OPEN,
            next_available_instant=at_time(today, opening),
        )

    lead_time = day_settings.service_settings(service_type).lead_time_minutes
    return AvailabilityResult(
        available=True,
        next_available_instant=now,
        displayed_ready_time=add_minutes(now, lead_time),
    )

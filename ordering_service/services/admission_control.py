"""Throughput admission control over a trailing order window.

The check is advisory: it neither reserves capacity nor locks, so two
concurrent checks can both admit. The order placement path must re-check
when it commits.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from datetime import datetime, timedelta
from enum import Enum
from threading import Event

from ordering_service.core.config import settings
from ordering_service.core.errors import AvailabilityCheckCancelledError, OrderVolumeUnavailableError
from ordering_service.schemas.availability import AdmissionResult, AvailabilityReason
from ordering_service.schemas.ordering_times import ServiceType
from ordering_service.schemas.restrictions import RestrictionConfig, RestrictionType
from ordering_service.services.order_volume import OrderVolumeSource, VolumeCount, run_with_timeout

logger = logging.getLogger(__name__)

# An order at t stays inside [now - size, now) up to and including now = t + size.
WINDOW_EXIT_STEP: timedelta = timedelta(microseconds=1)


class FailurePolicy(str, Enum):
    """What to answer when the order volume cannot be read."""

    CLOSED = "closed"
    OPEN = "open"


def _default_failure_policy() -> FailurePolicy:
    return FailurePolicy(settings.admission_failure_policy)


def retry_after(now: datetime, window: timedelta, oldest: datetime | None) -> datetime:
    """Return when the oldest counted order leaves the window, or now + window if unknown."""
    if oldest is None:
        return now + window
    return oldest + window + WINDOW_EXIT_STEP


def evaluate_admission(
    config: RestrictionConfig,
    service_type: ServiceType,
    now: datetime,
    volume_source: OrderVolumeSource,
    *,
    branch_id: int,
    executor: Executor | None = None,
    timeout_seconds: float | None = None,
    failure_policy: FailurePolicy | None = None,
    cancel_event: Event | None = None,
) -> AdmissionResult:
    """Decide whether the restriction caps admit an order at now.

    Without an executor the volume query runs inline and no timeout is applied.
    """
    if config.type is RestrictionType.NONE:
        return AdmissionResult(admitted=True)

    scope = config.active_scope(service_type)
    if scope is None:
        return AdmissionResult(admitted=True)

    day = config.day_settings(scope, now.date())
    if not day.enabled:
        return AdmissionResult(admitted=True)

    window = timedelta(minutes=day.window_size_minutes)
    window_start = now - window
    policy = failure_policy or _default_failure_policy()
    if cancel_event is not None and cancel_event.is_set():
        raise AvailabilityCheckCancelledError("order volume query cancelled")

    try:
        if executor is None:
            volume: VolumeCount = volume_source.count_in_window(branch_id, scope, window_start, now)
        else:
            volume = run_with_timeout(
                executor,
                volume_source.count_in_window,
                branch_id,
                scope,
                window_start,
                now,
                timeout=timeout_seconds,
                cancel_event=cancel_event,
            )
    except AvailabilityCheckCancelledError:
        raise
    except OrderVolumeUnavailableError as exc:
        logger.warning("[ADMISSION] branch=%s scope=%s volume query timed out (%s); failing %s", branch_id, scope, exc, policy.value)
        return _apply_failure_policy(policy, now, window)
    except Exception:
        logger.exception("[ADMISSION] branch=%s scope=%s volume query failed; failing %s", branch_id, scope, policy.value)
        return _apply_failure_policy(policy, now, window)

    if volume.count >= day.order_total:
        logger.info(
            "[ADMISSION] branch=%s scope=%s limit reached: %s orders in %s min (cap %s)",
            branch_id,
            scope,
            volume.count,
            day.window_size_minutes,
            day.order_total,
        )
        return AdmissionResult(
            admitted=False,
            reason=AvailabilityReason.THROUGHPUT_LIMIT_REACHED,
            retry_after_instant=retry_after(now, window, volume.oldest_timestamp),
        )
    return AdmissionResult(admitted=True)


def _apply_failure_policy(policy: FailurePolicy, now: datetime, window: timedelta) -> AdmissionResult:
    if policy is FailurePolicy.OPEN:
        return AdmissionResult(admitted=True)
    return AdmissionResult(
        admitted=False,
        reason=AvailabilityReason.THROUGHPUT_LIMIT_REACHED,
        retry_after_instant=now + window,
    )

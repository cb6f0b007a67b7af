"""Order availability checks combining schedule and throughput limits."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime
from threading import Event

from ordering_service.core.config import settings
from ordering_service.core.errors import AvailabilityCheckCancelledError
from ordering_service.schemas.availability import AvailabilityReason, AvailabilityResult
from ordering_service.schemas.ordering_times import LeadTimeRead, LeadTimesResponse, ServiceType, weekday_for
from ordering_service.services.admission_control import FailurePolicy, evaluate_admission
from ordering_service.services.order_volume import OrderVolumeSource
from ordering_service.services.schedule_evaluator import evaluate_schedule
from ordering_service.services.schedule_store import ScheduleStore
from ordering_service.utils.time import add_minutes, branch_now, to_branch_local

logger = logging.getLogger(__name__)

volume_executor: ThreadPoolExecutor = ThreadPoolExecutor(
    max_workers=settings.volume_query_workers,
    thread_name_prefix="order-volume",
)


class AvailabilityService:
    """Answers whether a branch takes orders for a service type at an instant.

    The schedule is checked first; the order volume is only queried when the
    schedule allows ordering. Instances hold no mutable state and can be used
    from several threads at once.

    Volume queries run on the shared ``volume_executor`` with the configured
    timeout unless an executor and timeout are given.
    """

    def __init__(
        self,
        store: ScheduleStore,
        volume_source: OrderVolumeSource,
        *,
        executor: Executor | None = None,
        timeout_seconds: float | None = None,
        failure_policy: FailurePolicy | None = None,
        max_scan_days: int | None = None,
    ) -> None:
        self._store = store
        self._volume_source = volume_source
        self._executor = executor if executor is not None else volume_executor
        self._timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.volume_query_timeout_seconds
        )
        self._failure_policy = failure_policy
        self._max_scan_days = max_scan_days

    def _local_now(self, tz_name: str, requested_instant: datetime | None) -> datetime:
        if requested_instant is None:
            return branch_now(tz_name)
        return to_branch_local(requested_instant, tz_name)

    def check_availability(
        self,
        branch_id: int,
        service_type: ServiceType,
        requested_instant: datetime | None = None,
        cancel_event: Event | None = None,
    ) -> AvailabilityResult:
        """Return the availability verdict; requested_instant defaults to branch-local now."""
        if cancel_event is not None and cancel_event.is_set():
            raise AvailabilityCheckCancelledError("availability check cancelled")
        branch = self._store.get_branch(branch_id)
        now = self._local_now(branch.timezone, requested_instant)

        verdict = evaluate_schedule(
            self._store.get_weekly_schedule(branch_id),
            self._store.get_closed_dates(branch_id),
            service_type,
            now,
            max_scan_days=self._max_scan_days,
        )
        if not verdict.available:
            logger.debug("[AVAILABILITY] branch=%s %s unavailable: %s", branch_id, service_type.value, verdict.reason.value)
            return verdict

        admission = evaluate_admission(
            self._store.get_restriction_config(branch_id),
            service_type,
            now,
            self._volume_source,
            branch_id=branch_id,
            executor=self._executor,
            timeout_seconds=self._timeout_seconds,
            failure_policy=self._failure_policy,
            cancel_event=cancel_event,
        )
        if not admission.admitted:
            return AvailabilityResult(
                available=False,
                reason=AvailabilityReason.THROUGHPUT_LIMIT_REACHED,
                next_available_instant=admission.retry_after_instant,
            )
        return verdict

    def lead_times(self, branch_id: int, at: datetime | None = None) -> LeadTimesResponse:
        """Return each service type's lead time and displayed ready time for the branch-local day."""
        branch = self._store.get_branch(branch_id)
        now = self._local_now(branch.timezone, at)
        day_settings = self._store.get_weekly_schedule(branch_id).for_date(now.date())

        lead_times: list[LeadTimeRead] = []
        for service_type in ServiceType:
            lead = day_settings.service_settings(service_type).lead_time_minutes
            lead_times.append(
                LeadTimeRead(
                    service_type=service_type,
                    allowed=day_settings.is_allowed(service_type),
                    lead_time_minutes=lead,
                    displayed_time=add_minutes(now, lead),
                )
            )
        return LeadTimesResponse(day=weekday_for(now.date()), service_date=now.date(), lead_times=lead_times)

"""Order volume counting for throughput restrictions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, wait
from datetime import datetime
from decimal import Decimal
from threading import Event
from time import monotonic
from typing import NamedTuple, Protocol, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from ordering_service.core.config import settings
from ordering_service.core.errors import AvailabilityCheckCancelledError, OrderVolumeUnavailableError
from ordering_service.models import Branch, Order
from ordering_service.schemas.restrictions import COMBINED_SCOPE
from ordering_service.utils.time import branch_local_to_utc, utc_to_branch_local

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCEL_POLL_SECONDS: float = 0.05


class VolumeCount(NamedTuple):
    """Orders placed in a window; oldest_timestamp is branch-local when known."""

    count: int
    oldest_timestamp: datetime | None = None
    total_value: Decimal = Decimal("0.00")


class OrderVolumeSource(Protocol):
    """Answers how many orders a branch took for a scope in [window_start, window_end)."""

    def count_in_window(
        self,
        branch_id: int,
        scope: str,
        window_start: datetime,
        window_end: datetime,
    ) -> VolumeCount: ...


class SqlOrderVolumeSource:
    """Counts rows of the orders table.

    Each query opens its own session so a query abandoned after a timeout
    never shares a session with the caller.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def count_in_window(
        self,
        branch_id: int,
        scope: str,
        window_start: datetime,
        window_end: datetime,
    ) -> VolumeCount:
        with self._session_factory() as db:
            branch: Branch | None = db.get(Branch, branch_id)
            tz_name: str = branch.timezone if branch is not None else settings.default_branch_timezone

            stmt = select(
                func.count(Order.id),
                func.min(Order.created_at),
                func.coalesce(func.sum(Order.total_amount), 0),
            ).where(
                Order.branch_id == branch_id,
                Order.created_at >= branch_local_to_utc(window_start, tz_name),
                Order.created_at < branch_local_to_utc(window_end, tz_name),
            )
            if scope != COMBINED_SCOPE:
                stmt = stmt.where(Order.service_type == scope)

            count, oldest, total = db.execute(stmt).one()

        logger.debug("[ADMISSION] branch=%s scope=%s orders in window=%s", branch_id, scope, count)
        oldest_local: datetime | None = utc_to_branch_local(oldest, tz_name) if oldest is not None else None
        return VolumeCount(count=int(count), oldest_timestamp=oldest_local, total_value=Decimal(str(total)))


def run_with_timeout(
    executor: Executor,
    fn: Callable[..., T],
    *args: object,
    timeout: float | None,
    cancel_event: Event | None = None,
) -> T:
    """Run fn on the executor, honouring a deadline and a cancellation flag.

    Raises OrderVolumeUnavailableError on timeout and
    AvailabilityCheckCancelledError once cancel_event is set. Errors raised by
    fn propagate unchanged.
    """
    future = executor.submit(fn, *args)
    deadline: float | None = monotonic() + timeout if timeout is not None else None

    while True:
        if cancel_event is not None and cancel_event.is_set():
            future.cancel()
            raise AvailabilityCheckCancelledError("order volume query cancelled")

        wait_for: float = CANCEL_POLL_SECONDS
        if deadline is not None:
            remaining = deadline - monotonic()
            if remaining <= 0:
                future.cancel()
                raise OrderVolumeUnavailableError(f"order volume query exceeded {timeout:.2f}s")
            wait_for = min(wait_for, remaining)

        done, _ = wait([future], timeout=wait_for)
        if done:
            return future.result()

"""Availability check schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from ordering_service.schemas.ordering_times import CamelModel, WallClock


class AvailabilityReason(str, Enum):
    """Why an order cannot be placed; empty when it can."""

    AVAILABLE = ""
    CLOSED_DATE = "ClosedDate"
    SERVICE_TYPE_DISABLED_FOR_DAY = "ServiceTypeDisabledForDay"
    ON_BREAK = "OnBreak"
    NOT_YET_OPEN = "NotYetOpen"
    NO_UPCOMING_SLOT = "NoUpcomingSlot"
    THROUGHPUT_LIMIT_REACHED = "ThroughputLimitReached"


class AvailabilityResult(CamelModel):
    """Final verdict returned to ordering frontends.

    ``next_available_instant`` is branch-local. ``displayed_ready_time`` is the
    lead-time adjusted ready time and is only set when ordering is available.
    """

    available: bool
    reason: AvailabilityReason = AvailabilityReason.AVAILABLE
    next_available_instant: datetime | None = None
    displayed_ready_time: WallClock | None = Field(default=None)


class AdmissionResult(CamelModel):
    """Throughput verdict for an otherwise available slot."""

    admitted: bool
    reason: AvailabilityReason = AvailabilityReason.AVAILABLE
    retry_after_instant: datetime | None = None

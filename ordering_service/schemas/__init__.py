"""Schema exports."""

from ordering_service.schemas.availability import AvailabilityReason, AvailabilityResult
from ordering_service.schemas.branches import BranchCreate, BranchRead
from ordering_service.schemas.closed_dates import ClosedDate, ClosedDateRead, ClosureType
from ordering_service.schemas.ordering_times import (
    DaySettings,
    LeadTimeRead,
    LeadTimesResponse,
    ServiceType,
    ServiceTypeSettings,
    TimeWindow,
    WeeklySchedule,
    Weekday,
)
from ordering_service.schemas.restrictions import RestrictionConfig, RestrictionDaySettings, RestrictionType

__all__ = [
    "AvailabilityReason",
    "AvailabilityResult",
    "BranchCreate",
    "BranchRead",
    "ClosedDate",
    "ClosedDateRead",
    "ClosureType",
    "DaySettings",
    "LeadTimeRead",
    "LeadTimesResponse",
    "RestrictionConfig",
    "RestrictionDaySettings",
    "RestrictionType",
    "ServiceType",
    "ServiceTypeSettings",
    "TimeWindow",
    "WeeklySchedule",
    "Weekday",
]

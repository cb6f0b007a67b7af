"""Weekly ordering-time schemas.

These models double as the immutable per-request snapshots consumed by the
schedule evaluator, so every invariant of a branch's weekly configuration is
enforced here.
"""

from __future__ import annotations

from datetime import date, time
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel


class ServiceType(str, Enum):
    """Ordering channel."""

    COLLECTION = "collection"
    DELIVERY = "delivery"
    TABLE_ORDERING = "tableOrdering"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


# Ordered to match date.weekday().
WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)


def weekday_for(day: date) -> Weekday:
    """Return the weekday key for a calendar date."""
    return WEEKDAYS[day.weekday()]


def _truncate_to_minute(value: time) -> time:
    return time(hour=value.hour, minute=value.minute)


WallClock = Annotated[
    time,
    AfterValidator(_truncate_to_minute),
    PlainSerializer(lambda value: value.strftime("%H:%M"), return_type=str),
]


class CamelModel(BaseModel):
    """Frozen model exposed with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TimeWindow(CamelModel):
    """Same-day wall-clock interval [start, end)."""

    start: WallClock
    end: WallClock

    @model_validator(mode="after")
    def _check_order(self) -> TimeWindow:
        if self.start >= self.end:
            raise ValueError(f"window start {self.start:%H:%M} must be before end {self.end:%H:%M}")
        return self

    def contains(self, other: TimeWindow) -> bool:
        return self.start <= other.start and other.end <= self.end


class ServiceTypeSettings(CamelModel):
    """Lead time and optional custom window for one service type."""

    lead_time_minutes: int = Field(default=0, ge=0)
    use_custom_window: bool = False
    custom_window: TimeWindow | None = None

    @model_validator(mode="after")
    def _require_custom_window(self) -> ServiceTypeSettings:
        if self.use_custom_window and self.custom_window is None:
            raise ValueError("customWindow is required when useCustomWindow is set")
        return self


class DaySettings(CamelModel):
    """Ordering configuration for one weekday."""

    collection_allowed: bool = False
    delivery_allowed: bool = False
    table_ordering_allowed: bool = False
    default_window: TimeWindow
    break_window: TimeWindow | None = None
    collection: ServiceTypeSettings = ServiceTypeSettings()
    delivery: ServiceTypeSettings = ServiceTypeSettings()
    table_ordering: ServiceTypeSettings = ServiceTypeSettings()

    @model_validator(mode="after")
    def _check_break(self) -> DaySettings:
        if self.break_window is not None and not self.default_window.contains(self.break_window):
            raise ValueError("breakWindow must lie inside defaultWindow")
        return self

    def is_allowed(self, service_type: ServiceType) -> bool:
        return {
            ServiceType.COLLECTION: self.collection_allowed,
            ServiceType.DELIVERY: self.delivery_allowed,
            ServiceType.TABLE_ORDERING: self.table_ordering_allowed,
        }[service_type]

    def service_settings(self, service_type: ServiceType) -> ServiceTypeSettings:
        return {
            ServiceType.COLLECTION: self.collection,
            ServiceType.DELIVERY: self.delivery,
            ServiceType.TABLE_ORDERING: self.table_ordering,
        }[service_type]

    def effective_window(self, service_type: ServiceType) -> TimeWindow:
        """Return the custom window when enabled, otherwise the default window."""
        service = self.service_settings(service_type)
        if service.use_custom_window and service.custom_window is not None:
            return service.custom_window
        return self.default_window


class WeeklySchedule(CamelModel):
    """Seven-day ordering configuration of a branch."""

    days: dict[Weekday, DaySettings]

    @model_validator(mode="after")
    def _require_every_weekday(self) -> WeeklySchedule:
        missing = [day.value for day in WEEKDAYS if day not in self.days]
        if missing:
            raise ValueError(f"missing weekday settings: {', '.join(missing)}")
        return self

    def for_date(self, day: date) -> DaySettings:
        return self.days[weekday_for(day)]


class LeadTimeRead(CamelModel):
    """Today's lead time and displayed ready time for one service type."""

    service_type: ServiceType
    allowed: bool
    lead_time_minutes: int
    displayed_time: WallClock


class LeadTimesResponse(CamelModel):
    """Lead times in force for a branch-local day."""

    day: Weekday
    service_date: date = Field(alias="date")
    lead_times: list[LeadTimeRead]

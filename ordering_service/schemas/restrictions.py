"""Throughput restriction schemas."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import Field, model_validator

from ordering_service.schemas.ordering_times import WEEKDAYS, CamelModel, ServiceType, Weekday, weekday_for

COMBINED_SCOPE: str = "combined"


class RestrictionType(str, Enum):
    NONE = "None"
    COMBINED_TOTAL = "CombinedTotal"
    SPLIT_TOTAL = "SplitTotal"


class RestrictionDaySettings(CamelModel):
    """Order cap for a trailing window on one weekday."""

    enabled: bool = False
    order_total: int = Field(default=0, ge=0)
    window_size_minutes: int = Field(default=5, ge=1)


RestrictionWeek = dict[Weekday, RestrictionDaySettings]


class RestrictionConfig(CamelModel):
    """Restriction mode plus the weekly caps of every configured scope.

    ``combined`` is read under ``CombinedTotal``; the per service type mappings
    are read under ``SplitTotal``, where a service type without a mapping is
    unrestricted.
    """

    type: RestrictionType = RestrictionType.NONE
    combined: RestrictionWeek | None = None
    collection: RestrictionWeek | None = None
    delivery: RestrictionWeek | None = None
    table_ordering: RestrictionWeek | None = None

    @model_validator(mode="after")
    def _check_scopes(self) -> RestrictionConfig:
        for scope, week in self.scopes().items():
            missing = [day.value for day in WEEKDAYS if day not in week]
            if missing:
                raise ValueError(f"restriction scope {scope} is missing: {', '.join(missing)}")
        if self.type is RestrictionType.COMBINED_TOTAL and self.combined is None:
            raise ValueError("CombinedTotal requires the combined scope")
        return self

    def scopes(self) -> dict[str, RestrictionWeek]:
        """Return configured scope mappings keyed by scope name."""
        candidates = {
            COMBINED_SCOPE: self.combined,
            ServiceType.COLLECTION.value: self.collection,
            ServiceType.DELIVERY.value: self.delivery,
            ServiceType.TABLE_ORDERING.value: self.table_ordering,
        }
        return {scope: week for scope, week in candidates.items() if week is not None}

    def active_scope(self, service_type: ServiceType) -> str | None:
        """Return the scope that counts orders for the service type."""
        if self.type is RestrictionType.COMBINED_TOTAL:
            return COMBINED_SCOPE
        if self.type is RestrictionType.SPLIT_TOTAL and service_type.value in self.scopes():
            return service_type.value
        return None

    def day_settings(self, scope: str, day: date) -> RestrictionDaySettings:
        return self.scopes()[scope][weekday_for(day)]

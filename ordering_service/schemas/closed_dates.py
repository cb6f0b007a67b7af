"""Closed date schemas."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import Field, model_validator

from ordering_service.schemas.ordering_times import CamelModel


class ClosureType(str, Enum):
    SINGLE = "single"
    RANGE = "range"


class ClosedDate(CamelModel):
    """A closure of one calendar date or an inclusive date range."""

    start_date: date = Field(alias="date")
    type: ClosureType = ClosureType.SINGLE
    end_date: date | None = None
    reason: str = ""

    @model_validator(mode="after")
    def _check_range(self) -> ClosedDate:
        if self.type is ClosureType.RANGE:
            if self.end_date is None:
                raise ValueError("endDate is required for a range closure")
            if self.end_date < self.start_date:
                raise ValueError("endDate must not precede date")
        return self

    @property
    def last_date(self) -> date:
        if self.type is ClosureType.RANGE and self.end_date is not None:
            return self.end_date
        return self.start_date

    def covers(self, day: date) -> bool:
        """Return True when the closure blocks the given calendar date."""
        if self.type is ClosureType.SINGLE:
            return day == self.start_date
        return self.start_date <= day <= self.last_date


class ClosedDateRead(ClosedDate):
    """Persisted closed date."""

    id: int


def is_closed_on(closed_dates: list[ClosedDate], day: date) -> ClosedDate | None:
    """Return the first closure covering the date, if any."""
    for closed in closed_dates:
        if closed.covers(day):
            return closed
    return None

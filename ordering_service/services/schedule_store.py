"""Read-only snapshots of a branch's ordering configuration."""

from __future__ import annotations

from datetime import time
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session, selectinload

from ordering_service.core.errors import BranchNotFoundError, ConfigurationInvalidError
from ordering_service.models import Branch, ClosedDateEntry, OrderingDaySetting, RestrictionDay, RestrictionSetting
from ordering_service.schemas.closed_dates import ClosedDateRead
from ordering_service.schemas.ordering_times import (
    DaySettings,
    ServiceType,
    ServiceTypeSettings,
    TimeWindow,
    WeeklySchedule,
)
from ordering_service.schemas.restrictions import RestrictionConfig, RestrictionDaySettings


class ScheduleStore(Protocol):
    """Source of consistent configuration snapshots for one branch."""

    def get_branch(self, branch_id: int) -> Branch: ...

    def get_weekly_schedule(self, branch_id: int) -> WeeklySchedule: ...

    def get_closed_dates(self, branch_id: int) -> list[ClosedDateRead]: ...

    def get_restriction_config(self, branch_id: int) -> RestrictionConfig: ...


def _window(start: time | None, end: time | None) -> TimeWindow | None:
    if start is None or end is None:
        return None
    return TimeWindow(start=start, end=end)


def day_settings_from_row(row: OrderingDaySetting) -> DaySettings:
    """Build a validated DaySettings snapshot from its ORM row."""
    services: dict[str, ServiceTypeSettings] = {}
    for service_row in row.service_settings:
        services[service_row.service_type] = ServiceTypeSettings(
            lead_time_minutes=service_row.lead_time_minutes,
            use_custom_window=service_row.use_custom_window,
            custom_window=_window(service_row.custom_start, service_row.custom_end),
        )
    return DaySettings(
        collection_allowed=row.collection_allowed,
        delivery_allowed=row.delivery_allowed,
        table_ordering_allowed=row.table_ordering_allowed,
        default_window=TimeWindow(start=row.default_start, end=row.default_end),
        break_window=_window(row.break_start, row.break_end),
        collection=services.get(ServiceType.COLLECTION.value, ServiceTypeSettings()),
        delivery=services.get(ServiceType.DELIVERY.value, ServiceTypeSettings()),
        table_ordering=services.get(ServiceType.TABLE_ORDERING.value, ServiceTypeSettings()),
    )


def closed_date_from_row(row: ClosedDateEntry) -> ClosedDateRead:
    return ClosedDateRead(
        id=row.id,
        start_date=row.start_date,
        type=row.closure_type,
        end_date=row.end_date,
        reason=row.reason,
    )


class SqlScheduleStore:
    """Loads configuration snapshots through a SQLAlchemy session.

    Rows that break an invariant raise ConfigurationInvalidError instead of
    producing a best-effort snapshot.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_branch(self, branch_id: int) -> Branch:
        branch: Branch | None = self._db.get(Branch, branch_id)
        if branch is None or not branch.is_active:
            raise BranchNotFoundError(f"branch {branch_id} not found")
        return branch

    def get_weekly_schedule(self, branch_id: int) -> WeeklySchedule:
        rows: list[OrderingDaySetting] = (
            self._db.query(OrderingDaySetting)
            .options(selectinload(OrderingDaySetting.service_settings))
            .filter(OrderingDaySetting.branch_id == branch_id)
            .all()
        )
        try:
            return WeeklySchedule(days={row.weekday: day_settings_from_row(row) for row in rows})
        except ValidationError as exc:
            raise ConfigurationInvalidError(
                f"weekly schedule of branch {branch_id} is invalid: {exc}", branch_id=branch_id
            ) from exc

    def get_closed_dates(self, branch_id: int) -> list[ClosedDateRead]:
        rows: list[ClosedDateEntry] = (
            self._db.query(ClosedDateEntry)
            .filter(ClosedDateEntry.branch_id == branch_id)
            .order_by(ClosedDateEntry.start_date.asc(), ClosedDateEntry.id.asc())
            .all()
        )
        try:
            return [closed_date_from_row(row) for row in rows]
        except ValidationError as exc:
            raise ConfigurationInvalidError(
                f"closed dates of branch {branch_id} are invalid: {exc}", branch_id=branch_id
            ) from exc

    def get_restriction_config(self, branch_id: int) -> RestrictionConfig:
        setting: RestrictionSetting | None = self._db.get(RestrictionSetting, branch_id)
        if setting is None:
            return RestrictionConfig()

        rows: list[RestrictionDay] = (
            self._db.query(RestrictionDay).filter(RestrictionDay.branch_id == branch_id).all()
        )
        scopes: dict[str, dict[str, RestrictionDaySettings]] = {}
        try:
            for row in rows:
                scopes.setdefault(row.scope, {})[row.weekday] = RestrictionDaySettings(
                    enabled=row.enabled,
                    order_total=row.order_total,
                    window_size_minutes=row.window_size_minutes,
                )
            return RestrictionConfig(type=setting.restriction_type, **scopes)
        except ValidationError as exc:
            raise ConfigurationInvalidError(
                f"restriction config of branch {branch_id} is invalid: {exc}", branch_id=branch_id
            ) from exc

"""Persistence helpers for branch ordering settings."""

from __future__ import annotations

from sqlalchemy.orm import Session

from ordering_service.models import (
    Branch,
    ClosedDateEntry,
    OrderingDaySetting,
    OrderingServiceSetting,
    RestrictionDay,
    RestrictionSetting,
)
from ordering_service.schemas.closed_dates import ClosedDate
from ordering_service.schemas.ordering_times import ServiceType, WeeklySchedule
from ordering_service.schemas.restrictions import RestrictionConfig


def create_branch(db: Session, *, name: str, timezone: str) -> Branch:
    branch = Branch(name=name, timezone=timezone, is_active=True)
    db.add(branch)
    db.commit()
    db.refresh(branch)
    return branch


def save_weekly_schedule(db: Session, branch_id: int, schedule: WeeklySchedule) -> None:
    """Replace every weekday row of a branch with the given schedule."""
    existing: dict[str, OrderingDaySetting] = {
        row.weekday: row
        for row in db.query(OrderingDaySetting).filter(OrderingDaySetting.branch_id == branch_id).all()
    }

    for weekday, day in schedule.days.items():
        row = existing.get(weekday.value)
        if row is None:
            row = OrderingDaySetting(branch_id=branch_id, weekday=weekday.value)
            db.add(row)
        row.collection_allowed = day.collection_allowed
        row.delivery_allowed = day.delivery_allowed
        row.table_ordering_allowed = day.table_ordering_allowed
        row.default_start = day.default_window.start
        row.default_end = day.default_window.end
        row.break_start = day.break_window.start if day.break_window else None
        row.break_end = day.break_window.end if day.break_window else None

        row.service_settings.clear()
        db.flush()
        for service_type in ServiceType:
            service = day.service_settings(service_type)
            row.service_settings.append(
                OrderingServiceSetting(
                    service_type=service_type.value,
                    lead_time_minutes=service.lead_time_minutes,
                    use_custom_window=service.use_custom_window,
                    custom_start=service.custom_window.start if service.custom_window else None,
                    custom_end=service.custom_window.end if service.custom_window else None,
                )
            )

    db.commit()


def add_closed_date(db: Session, branch_id: int, closed: ClosedDate) -> ClosedDateEntry:
    entry = ClosedDateEntry(
        branch_id=branch_id,
        closure_type=closed.type.value,
        start_date=closed.start_date,
        end_date=closed.end_date,
        reason=closed.reason,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def delete_closed_date(db: Session, branch_id: int, closed_date_id: int) -> bool:
    """Delete one closed date; return False when it does not belong to the branch."""
    entry: ClosedDateEntry | None = (
        db.query(ClosedDateEntry)
        .filter(ClosedDateEntry.id == closed_date_id, ClosedDateEntry.branch_id == branch_id)
        .first()
    )
    if entry is None:
        return False
    db.delete(entry)
    db.commit()
    return True


def delete_all_closed_dates(db: Session, branch_id: int) -> int:
    deleted: int = db.query(ClosedDateEntry).filter(ClosedDateEntry.branch_id == branch_id).delete()
    db.commit()
    return deleted


def save_restriction_config(db: Session, branch_id: int, config: RestrictionConfig) -> None:
    """Replace a branch's restriction mode and every scope mapping."""
    setting: RestrictionSetting | None = db.get(RestrictionSetting, branch_id)
    if setting is None:
        setting = RestrictionSetting(branch_id=branch_id)
        db.add(setting)
    setting.restriction_type = config.type.value

    db.query(RestrictionDay).filter(RestrictionDay.branch_id == branch_id).delete()
    for scope, week in config.scopes().items():
        for weekday, day in week.items():
            db.add(
                RestrictionDay(
                    branch_id=branch_id,
                    scope=scope,
                    weekday=weekday.value,
                    enabled=day.enabled,
                    order_total=day.order_total,
                    window_size_minutes=day.window_size_minutes,
                )
            )

    db.commit()

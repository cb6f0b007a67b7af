"""Branch and ordering settings endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ordering_service.core.errors import BranchNotFoundError, ConfigurationInvalidError
from ordering_service.db.session import get_db
from ordering_service.models import Branch
from ordering_service.schemas.branches import BranchCreate, BranchRead
from ordering_service.schemas.closed_dates import ClosedDate, ClosedDateRead
from ordering_service.schemas.ordering_times import WeeklySchedule
from ordering_service.schemas.restrictions import RestrictionConfig
from ordering_service.services.schedule_store import SqlScheduleStore, closed_date_from_row
from ordering_service.services.settings_service import (
    add_closed_date,
    create_branch,
    delete_all_closed_dates,
    delete_closed_date,
    save_restriction_config,
    save_weekly_schedule,
)

router: APIRouter = APIRouter()


def _serialize_branch(branch: Branch) -> BranchRead:
    return BranchRead(id=branch.id, name=branch.name, timezone=branch.timezone, is_active=branch.is_active)


def _require_branch(db: Session, branch_id: int) -> Branch:
    try:
        return SqlScheduleStore(db).get_branch(branch_id)
    except BranchNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Branch not found") from exc


@router.post("", response_model=BranchRead, status_code=status.HTTP_201_CREATED)
def create_branch_endpoint(payload: BranchCreate, db: Session = Depends(get_db)) -> BranchRead:
    return _serialize_branch(create_branch(db, name=payload.name, timezone=payload.timezone))


@router.get("/{branch_id}", response_model=BranchRead)
def get_branch(branch_id: int, db: Session = Depends(get_db)) -> BranchRead:
    return _serialize_branch(_require_branch(db, branch_id))


@router.get("/{branch_id}/ordering-times", response_model=WeeklySchedule)
def get_ordering_times(branch_id: int, db: Session = Depends(get_db)) -> WeeklySchedule:
    _require_branch(db, branch_id)
    try:
        return SqlScheduleStore(db).get_weekly_schedule(branch_id)
    except ConfigurationInvalidError as exc:
        raise HTTPException(status_code=409, detail="ConfigurationInvalid") from exc


@router.put("/{branch_id}/ordering-times", response_model=WeeklySchedule)
def put_ordering_times(branch_id: int, payload: WeeklySchedule, db: Session = Depends(get_db)) -> WeeklySchedule:
    """Replace the weekly ordering times of a branch."""
    _require_branch(db, branch_id)
    save_weekly_schedule(db, branch_id, payload)
    return SqlScheduleStore(db).get_weekly_schedule(branch_id)


@router.get("/{branch_id}/closed-dates", response_model=list[ClosedDateRead])
def list_closed_dates(
    branch_id: int,
    include_past: bool = Query(default=False, alias="includePast"),
    today: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[ClosedDateRead]:
    """List closures; by default only those ending today or later."""
    _require_branch(db, branch_id)
    closed_dates = SqlScheduleStore(db).get_closed_dates(branch_id)
    if include_past:
        return closed_dates
    reference: date = today or date.today()
    return [closed for closed in closed_dates if closed.last_date >= reference]


@router.post("/{branch_id}/closed-dates", response_model=ClosedDateRead, status_code=status.HTTP_201_CREATED)
def create_closed_date(branch_id: int, payload: ClosedDate, db: Session = Depends(get_db)) -> ClosedDateRead:
    _require_branch(db, branch_id)
    return closed_date_from_row(add_closed_date(db, branch_id, payload))


@router.delete("/{branch_id}/closed-dates/{closed_date_id}")
def remove_closed_date(branch_id: int, closed_date_id: int, db: Session = Depends(get_db)) -> dict[str, int]:
    _require_branch(db, branch_id)
    if not delete_closed_date(db, branch_id, closed_date_id):
        raise HTTPException(status_code=404, detail="Closed date not found")
    return {"deleted": 1}


@router.delete("/{branch_id}/closed-dates")
def remove_all_closed_dates(branch_id: int, db: Session = Depends(get_db)) -> dict[str, int]:
    _require_branch(db, branch_id)
    return {"deleted": delete_all_closed_dates(db, branch_id)}


@router.get("/{branch_id}/restrictions", response_model=RestrictionConfig)
def get_restrictions(branch_id: int, db: Session = Depends(get_db)) -> RestrictionConfig:
    _require_branch(db, branch_id)
    try:
        return SqlScheduleStore(db).get_restriction_config(branch_id)
    except ConfigurationInvalidError as exc:
        raise HTTPException(status_code=409, detail="ConfigurationInvalid") from exc


@router.put("/{branch_id}/restrictions", response_model=RestrictionConfig)
def put_restrictions(branch_id: int, payload: RestrictionConfig, db: Session = Depends(get_db)) -> RestrictionConfig:
    """Replace the restriction mode and caps of a branch."""
    _require_branch(db, branch_id)
    save_restriction_config(db, branch_id, payload)
    return SqlScheduleStore(db).get_restriction_config(branch_id)

"""Ordering availability endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ordering_service.core.config import settings
from ordering_service.core.errors import BranchNotFoundError, ConfigurationInvalidError
from ordering_service.db import session as db_session
from ordering_service.db.session import get_db
from ordering_service.schemas.availability import AvailabilityResult
from ordering_service.schemas.ordering_times import LeadTimesResponse, ServiceType
from ordering_service.services.admission_control import FailurePolicy
from ordering_service.services.availability_service import AvailabilityService, volume_executor
from ordering_service.services.order_volume import SqlOrderVolumeSource
from ordering_service.services.schedule_store import SqlScheduleStore

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(
        SqlScheduleStore(db),
        SqlOrderVolumeSource(db_session.SessionLocal),
        executor=volume_executor,
        timeout_seconds=settings.volume_query_timeout_seconds,
        failure_policy=FailurePolicy(settings.admission_failure_policy),
        max_scan_days=settings.max_scan_days,
    )


@router.get("/{branch_id}/availability", response_model=AvailabilityResult)
def check_availability(
    branch_id: int,
    service_type: ServiceType = Query(alias="serviceType"),
    at: datetime | None = Query(default=None),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResult:
    """Return whether an order can be placed now or at the requested instant."""
    try:
        return service.check_availability(branch_id, service_type, requested_instant=at)
    except BranchNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Branch not found") from exc
    except ConfigurationInvalidError as exc:
        logger.warning("[AVAILABILITY] branch=%s configuration invalid: %s", branch_id, exc)
        raise HTTPException(status_code=409, detail="ConfigurationInvalid") from exc


@router.get("/{branch_id}/lead-times", response_model=LeadTimesResponse)
def get_lead_times(
    branch_id: int,
    at: datetime | None = Query(default=None),
    service: AvailabilityService = Depends(get_availability_service),
) -> LeadTimesResponse:
    """Return today's lead times and displayed ready times."""
    try:
        return service.lead_times(branch_id, at=at)
    except BranchNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Branch not found") from exc
    except ConfigurationInvalidError as exc:
        logger.warning("[AVAILABILITY] branch=%s configuration invalid: %s", branch_id, exc)
        raise HTTPException(status_code=409, detail="ConfigurationInvalid") from exc

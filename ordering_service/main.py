"""FastAPI entrypoint for the ordering availability service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ordering_service.api.v1.api import api_router
from ordering_service.core.config import settings
from ordering_service.db import session as db_session
from ordering_service.db.base import Base

logger = logging.getLogger(__name__)

app = FastAPI(title="Ordering Availability Service", debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    Base.metadata.create_all(bind=db_session.engine)
    logger.info(
        "[BOOTSTRAP] env=%s volume timeout=%.2fs admission failure policy=%s",
        settings.app_env,
        settings.volume_query_timeout_seconds,
        settings.admission_failure_policy,
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

"""Application configuration."""

from os import getenv
from typing import Literal

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "ordering_service API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./ordering_service.db")
    default_branch_timezone: str = getenv("DEFAULT_BRANCH_TIMEZONE", "Europe/London")
    volume_query_timeout_seconds: float = float(getenv("VOLUME_QUERY_TIMEOUT_SECONDS", "2.0"))
    # "closed" denies admission when the order volume query fails, "open" admits.
    admission_failure_policy: Literal["closed", "open"] = Field(
        default=getenv("ADMISSION_FAILURE_POLICY", "closed").strip().lower(),
        validate_default=True,
    )
    volume_query_workers: int = int(getenv("VOLUME_QUERY_WORKERS", "8"))
    max_scan_days: int = int(getenv("MAX_SCAN_DAYS", "366"))


settings: Settings = Settings()

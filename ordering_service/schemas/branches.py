"""Branch API schemas."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator

from ordering_service.schemas.ordering_times import CamelModel


class BranchCreate(CamelModel):
    """Payload for creating a branch."""

    name: str = Field(min_length=1, max_length=255)
    timezone: str = "Europe/London"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value


class BranchRead(CamelModel):
    """Serialized branch."""

    id: int
    name: str
    timezone: str
    is_active: bool

"""Branch ORM model."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordering_service.db.base import Base


class Branch(Base):
    """A restaurant outlet taking collection, delivery and table orders."""

    __tablename__ = "branches"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Europe/London")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    day_settings: Mapped[list["OrderingDaySetting"]] = relationship(
        back_populates="branch", cascade="all, delete-orphan"
    )
    closed_dates: Mapped[list["ClosedDateEntry"]] = relationship(
        back_populates="branch", cascade="all, delete-orphan"
    )

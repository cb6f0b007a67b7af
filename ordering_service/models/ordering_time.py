"""Weekly ordering-time ORM models."""

from datetime import datetime, time, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordering_service.db.base import Base


class OrderingDaySetting(Base):
    """Ordering window and per-channel switches for one weekday of a branch."""

    __tablename__ = "ordering_day_settings"
    __table_args__ = (
        UniqueConstraint("branch_id", "weekday", name="uq_ordering_day_branch_weekday"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    branch_id: Mapped[int] = mapped_column(ForeignKey("branches.id"), nullable=False, index=True)
    weekday: Mapped[str] = mapped_column(String(9), nullable=False)
    collection_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    delivery_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    table_ordering_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    default_start: Mapped[time] = mapped_column(Time, nullable=False)
    default_end: Mapped[time] = mapped_column(Time, nullable=False)
    break_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    break_end: Mapped[time | None] = mapped_column(Time, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    branch: Mapped["Branch"] = relationship(back_populates="day_settings")
    service_settings: Mapped[list["OrderingServiceSetting"]] = relationship(
        back_populates="day_setting", cascade="all, delete-orphan"
    )


class OrderingServiceSetting(Base):
    """Lead time and optional custom window for one service type on one weekday."""

    __tablename__ = "ordering_service_settings"
    __table_args__ = (
        UniqueConstraint("day_setting_id", "service_type", name="uq_ordering_service_day_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    day_setting_id: Mapped[int] = mapped_column(ForeignKey("ordering_day_settings.id"), nullable=False)
    service_type: Mapped[str] = mapped_column(String(16), nullable=False)
    lead_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    use_custom_window: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    custom_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    custom_end: Mapped[time | None] = mapped_column(Time, nullable=True)

    day_setting: Mapped[OrderingDaySetting] = relationship(back_populates="service_settings")

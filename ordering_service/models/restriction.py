"""Throughput restriction ORM models."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ordering_service.db.base import Base


class RestrictionSetting(Base):
    """Selected restriction mode for a branch."""

    __tablename__ = "restriction_settings"

    branch_id: Mapped[int] = mapped_column(ForeignKey("branches.id"), primary_key=True)
    restriction_type: Mapped[str] = mapped_column(String(16), nullable=False, default="None")


class RestrictionDay(Base):
    """Per-weekday order cap for one restriction scope."""

    __tablename__ = "restriction_days"
    __table_args__ = (
        UniqueConstraint("branch_id", "scope", "weekday", name="uq_restriction_branch_scope_weekday"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    branch_id: Mapped[int] = mapped_column(ForeignKey("branches.id"), nullable=False, index=True)
    scope: Mapped[str] = mapped_column(String(16), nullable=False)
    weekday: Mapped[str] = mapped_column(String(9), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    window_size_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

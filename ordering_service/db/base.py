"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from ordering_service.models import branch as _branch  # noqa: E402,F401
from ordering_service.models import closed_date as _closed_date  # noqa: E402,F401
from ordering_service.models import order as _order  # noqa: E402,F401
from ordering_service.models import ordering_time as _ordering_time  # noqa: E402,F401
from ordering_service.models import restriction as _restriction  # noqa: E402,F401

"""Application models package."""

from ordering_service.models.branch import Branch
from ordering_service.models.closed_date import ClosedDateEntry
from ordering_service.models.order import Order
from ordering_service.models.ordering_time import OrderingDaySetting, OrderingServiceSetting
from ordering_service.models.restriction import RestrictionDay, RestrictionSetting

__all__ = [
    "Branch", "ClosedDateEntry", "Order", "OrderingDaySetting", "OrderingServiceSetting",
    "RestrictionDay", "RestrictionSetting",
]

# courtslot/core/enums.py
from enum import Enum


class RoleName(str, Enum):
    PLAYER = "PLAYER"
    OWNER = "OWNER"
    ADMIN = "ADMIN"


class BookingViewType(str, Enum):
    """Calendar granularity used to scope booking queries."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

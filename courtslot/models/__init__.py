"""
SQLAlchemy models for the booking engine.

Importing this package registers every table on ``Base.metadata``.
"""

from .booking import Booking, BookingSlot, BookingStatus
from .court import Court, Facility
from .user import User

__all__ = [
    "Booking",
    "BookingSlot",
    "BookingStatus",
    "Court",
    "Facility",
    "User",
]

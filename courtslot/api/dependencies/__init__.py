"""FastAPI dependencies."""

from .database import get_db
from .services import (
    get_acting_user_id,
    get_booking_cancellation_service,
    get_booking_creation_service,
    get_booking_query_service,
    get_booking_stats_service,
)

__all__ = [
    "get_acting_user_id",
    "get_booking_cancellation_service",
    "get_booking_creation_service",
    "get_booking_query_service",
    "get_booking_stats_service",
    "get_db",
]

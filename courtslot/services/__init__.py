"""
Service layer for the booking engine.

- BookingCreationService: atomic booking + slot creation
- BookingQueryService: calendar and paginated booking reads
- BookingCancellationService: slot cancellation with status cascade
- BookingStatsService: statistics and analytics
"""

from .base import BaseService
from .booking_cancellation_service import BookingCancellationService
from .booking_creation_service import BookingCreationService
from .booking_query_service import BookingQueryService
from .booking_stats_service import BookingStatsService
from .view_range import DateRange, resolve_view_range

__all__ = [
    "BaseService",
    "BookingCancellationService",
    "BookingCreationService",
    "BookingQueryService",
    "BookingStatsService",
    "DateRange",
    "resolve_view_range",
]

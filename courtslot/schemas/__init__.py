from .booking import (
    BookingCreate,
    BookingListFilters,
    BookingResponse,
    BookingSlotResponse,
    BookingsPageResponse,
    BookingStatsResponse,
    CancelSlotRequest,
    CancelSlotResponse,
    CourtUtilizationResponse,
    PopularSlotsResponse,
    SlotWindow,
    TimeAnalyticsResponse,
)

__all__ = [
    "BookingCreate",
    "BookingListFilters",
    "BookingResponse",
    "BookingSlotResponse",
    "BookingStatsResponse",
    "BookingsPageResponse",
    "CancelSlotRequest",
    "CancelSlotResponse",
    "CourtUtilizationResponse",
    "PopularSlotsResponse",
    "SlotWindow",
    "TimeAnalyticsResponse",
]

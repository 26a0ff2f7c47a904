# courtslot/schemas/booking.py
"""
Booking request and response schemas.

Business validation (non-empty, chronological slots; court and player
existence) lives in the services so it raises domain errors; the schemas
only enforce shape and simple bounds.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import Field, field_serializer, field_validator

from ..core.enums import BookingViewType
from ..models.booking import BookingStatus
from ._strict_base import StrictModel, StrictRequestModel


def _serialize_utc_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# Requests


class SlotWindow(StrictRequestModel):
    """One requested time slot."""

    start_time: datetime
    end_time: datetime


class BookingCreate(StrictRequestModel):
    court_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    slots: List[SlotWindow] = Field(..., description="Ordered, contiguous slot windows")
    unit_price: int = Field(..., ge=0, description="Price per slot in the smallest currency unit")
    total_price: int = Field(..., ge=0, description="Booking total in the smallest currency unit")
    slot_minutes: Optional[int] = Field(
        default=None, ge=1, description="Slot length, defaults to the court's"
    )
    is_recurrence: bool = False
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class BookingListFilters(StrictRequestModel):
    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, le=100)
    court_id: Optional[str] = None
    player_id: Optional[str] = None
    status: Optional[BookingStatus] = None
    search: Optional[str] = Field(default=None, max_length=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class CancelSlotRequest(StrictRequestModel):
    """Schema for cancelling one booking slot."""

    reason: str = Field(..., max_length=500, description="Cancellation reason")

    @field_validator("reason")
    @classmethod
    def clean_reason(cls, v: str) -> str:
        """Ensure reason is not empty."""
        if not v:
            raise ValueError("Cancellation reason cannot be empty")
        return v


# Responses


class BookingSlotResponse(StrictModel):
    id: str
    booking_id: str
    court_id: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    created_by: Optional[str] = None
    cancel_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("start_time", "end_time", "cancelled_at", "created_at", "updated_at")
    def serialize_utc(self, value: Optional[datetime]) -> Optional[str]:
        return _serialize_utc_datetime(value)


class BookingPlayerInfo(StrictModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None


class BookingCourtInfo(StrictModel):
    id: str
    name: str
    sport: Optional[str] = None
    surface: Optional[str] = None
    indoor: bool = False


class BookingFacilityInfo(StrictModel):
    id: str
    name: str


class BookingResponse(StrictModel):
    id: str
    player_id: str
    facility_id: str
    court_id: str
    status: BookingStatus
    start_at: datetime
    end_at: datetime
    slot_minutes: int
    unit_price: int
    total_price: int
    is_recurrence: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    slots: List[BookingSlotResponse] = Field(default_factory=list)
    player: Optional[BookingPlayerInfo] = None
    court: Optional[BookingCourtInfo] = None
    facility: Optional[BookingFacilityInfo] = None

    @field_serializer("start_at", "end_at", "created_at", "updated_at")
    def serialize_utc(self, value: Optional[datetime]) -> Optional[str]:
        return _serialize_utc_datetime(value)

    @classmethod
    def from_booking(cls, booking: Any, slots: Optional[List[Any]] = None) -> "BookingResponse":
        """
        Build a response from a Booking ORM model.

        Args:
            booking: The booking row with player/court/facility loaded
            slots: Slots to expose instead of all of the booking's slots
        """
        visible_slots = booking.slots if slots is None else slots
        return cls(
            id=booking.id,
            player_id=booking.player_id,
            facility_id=booking.facility_id,
            court_id=booking.court_id,
            status=booking.status,
            start_at=booking.start_at,
            end_at=booking.end_at,
            slot_minutes=booking.slot_minutes,
            unit_price=booking.unit_price,
            total_price=booking.total_price,
            is_recurrence=booking.is_recurrence,
            notes=booking.notes,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            slots=[BookingSlotResponse.model_validate(slot) for slot in visible_slots],
            player=BookingPlayerInfo.model_validate(booking.player) if booking.player else None,
            court=BookingCourtInfo.model_validate(booking.court) if booking.court else None,
            facility=BookingFacilityInfo.model_validate(booking.facility)
            if booking.facility
            else None,
        )


class BookingsPageResponse(StrictModel):
    bookings: List[BookingResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CancelSlotResponse(StrictModel):
    message: str = "Booking slot cancelled successfully"


class BookingStatsResponse(StrictModel):
    total_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    pending_bookings: int
    total_revenue: int
    average_booking_value: float


class TimeAnalyticsResponse(StrictModel):
    period: BookingViewType
    start: datetime
    end: datetime
    labels: List[str]
    data: List[int]
    revenue: List[int]


class PopularSlot(StrictModel):
    hour: int
    label: str
    count: int
    revenue: int


class PopularSlotsResponse(StrictModel):
    slots: List[PopularSlot]


class CourtUtilization(StrictModel):
    court_id: str
    court_name: str
    total_bookings: int
    revenue: int
    booked_minutes: int
    utilization_rate: float


class CourtUtilizationResponse(StrictModel):
    start: datetime
    end: datetime
    courts: List[CourtUtilization]

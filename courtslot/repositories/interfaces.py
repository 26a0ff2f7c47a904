# courtslot/repositories/interfaces.py
"""
Explicit store interfaces for bookings and booking slots.

Services depend on these rather than on a generic model-keyed repository,
so each entity's data access surface is spelled out and typed.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models.booking import Booking, BookingSlot, BookingStatus
from .booking_filters import BookingFilter


class BookingStore(ABC):
    @abstractmethod
    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[Booking]:
        """Fetch a booking, or None."""

    @abstractmethod
    def get_with_slots(self, booking_id: str) -> Optional[Booking]:
        """Fetch a booking with player, court, facility and all slots loaded."""

    @abstractmethod
    def get_for_update(self, booking_id: str) -> Optional[Booking]:
        """Fetch a booking and lock its row until the transaction ends."""

    @abstractmethod
    def create_with_slots(
        self, booking_data: Dict[str, Any], slots_data: Sequence[Dict[str, Any]]
    ) -> Booking:
        """Insert a booking and its slots in the current transaction."""

    @abstractmethod
    def find_page(self, booking_filter: BookingFilter, *, skip: int, limit: int) -> List[Booking]:
        """Matching bookings, newest first, with all slots loaded."""

    @abstractmethod
    def count_matching(self, booking_filter: BookingFilter) -> int:
        """Number of bookings matching the filter."""

    @abstractmethod
    def find_by_court_in_range(
        self, facility_id: str, court_id: str, start: datetime, end: datetime
    ) -> List[Booking]:
        """Bookings on a court with a slot starting inside [start, end], newest first."""

    @abstractmethod
    def update_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        """Set a booking's status."""

    @abstractmethod
    def status_totals(self, booking_filter: BookingFilter) -> Dict[str, Tuple[int, int]]:
        """Map of status to (booking count, summed total price)."""

    @abstractmethod
    def find_for_analytics(
        self, booking_filter: BookingFilter, start: datetime, end: datetime
    ) -> List[Tuple[datetime, int]]:
        """(start_at, total_price) pairs for bookings starting inside [start, end]."""

    @abstractmethod
    def court_totals(self, booking_filter: BookingFilter) -> Dict[str, Tuple[int, int]]:
        """Map of court id to (booking count, summed total price)."""


class BookingSlotStore(ABC):
    @abstractmethod
    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[BookingSlot]:
        """Fetch a slot, or None."""

    @abstractmethod
    def find_for_facility(self, slot_id: str, facility_id: str) -> Optional[BookingSlot]:
        """Fetch a slot only if its booking belongs to the facility."""

    @abstractmethod
    def list_for_booking(self, booking_id: str) -> List[BookingSlot]:
        """Current state of every slot of a booking, ascending by start time."""

    @abstractmethod
    def update(self, id: str, **kwargs) -> Optional[BookingSlot]:
        """Update slot fields."""

    @abstractmethod
    def find_overlapping(
        self, court_id: str, windows: Sequence[Tuple[datetime, datetime]]
    ) -> List[BookingSlot]:
        """Non-cancelled slots on the court overlapping any of the windows."""

    @abstractmethod
    def find_in_range(
        self, booking_ids: Sequence[str], start: datetime, end: datetime
    ) -> List[BookingSlot]:
        """Slots of the given bookings starting inside [start, end], ascending."""

    @abstractmethod
    def find_active_windows(
        self, facility_id: str, start: Optional[datetime], end: Optional[datetime]
    ) -> List[Tuple[str, datetime, datetime, int]]:
        """(court_id, start_time, end_time, unit_price) of non-cancelled slots in range."""

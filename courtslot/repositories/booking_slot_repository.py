# courtslot/repositories/booking_slot_repository.py
"""
Booking Slot Repository

Slot-level reads for tenant checks, range filtering, conflict detection
and analytics, plus the field updates used by cancellation.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ..models.booking import Booking, BookingSlot, BookingStatus
from ..models.types import ensure_utc
from .base_repository import BaseRepository
from .interfaces import BookingSlotStore


class BookingSlotRepository(BaseRepository[BookingSlot], BookingSlotStore):
    def __init__(self, db: Session):
        super().__init__(db, BookingSlot)

    def find_for_facility(self, slot_id: str, facility_id: str) -> Optional[BookingSlot]:
        query = (
            self.db.query(BookingSlot)
            .join(Booking, BookingSlot.booking_id == Booking.id)
            .filter(BookingSlot.id == slot_id, Booking.facility_id == facility_id)
        )
        return self._execute_first(query, f"slot {slot_id} in facility {facility_id}")

    def list_for_booking(self, booking_id: str) -> List[BookingSlot]:
        query = (
            self.db.query(BookingSlot)
            .filter(BookingSlot.booking_id == booking_id)
            .order_by(BookingSlot.start_time.asc())
            .populate_existing()
        )
        return self._execute_query(query)

    def find_overlapping(
        self, court_id: str, windows: Sequence[Tuple[datetime, datetime]]
    ) -> List[BookingSlot]:
        if not windows:
            return []
        overlaps = [
            and_(
                BookingSlot.start_time < ensure_utc(end),
                BookingSlot.end_time > ensure_utc(start),
            )
            for start, end in windows
        ]
        query = (
            self.db.query(BookingSlot)
            .filter(
                BookingSlot.court_id == court_id,
                BookingSlot.status != BookingStatus.CANCELLED.value,
                or_(*overlaps),
            )
            .order_by(BookingSlot.start_time.asc())
        )
        return self._execute_query(query)

    def find_in_range(
        self, booking_ids: Sequence[str], start: datetime, end: datetime
    ) -> List[BookingSlot]:
        if not booking_ids:
            return []
        query = (
            self.db.query(BookingSlot)
            .filter(
                BookingSlot.booking_id.in_(list(booking_ids)),
                BookingSlot.start_time >= ensure_utc(start),
                BookingSlot.start_time <= ensure_utc(end),
            )
            .order_by(BookingSlot.start_time.asc())
        )
        return self._execute_query(query)

    def find_active_windows(
        self, facility_id: str, start: Optional[datetime], end: Optional[datetime]
    ) -> List[Tuple[str, datetime, datetime, int]]:
        query = (
            self.db.query(
                BookingSlot.court_id,
                BookingSlot.start_time,
                BookingSlot.end_time,
                Booking.unit_price,
            )
            .join(Booking, BookingSlot.booking_id == Booking.id)
            .filter(
                Booking.facility_id == facility_id,
                BookingSlot.status != BookingStatus.CANCELLED.value,
            )
        )
        if start is not None:
            query = query.filter(BookingSlot.start_time >= ensure_utc(start))
        if end is not None:
            query = query.filter(BookingSlot.start_time <= ensure_utc(end))
        rows = self._execute_query(query.order_by(BookingSlot.start_time.asc()))
        return [(court_id, s, e, int(price)) for court_id, s, e, price in rows]

# courtslot/repositories/booking_repository.py
"""
Booking Repository

Implements booking data access:
- Atomic creation of a booking with its slots
- Court/range and filtered, paginated facility queries
- Row locking for the cancellation cascade
- Status and revenue aggregation for statistics
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..models.booking import Booking, BookingSlot, BookingStatus
from ..models.types import ensure_utc
from .base_repository import BaseRepository
from .booking_filters import AllOf, BookingFilter, CourtIdFilter, DateRangeFilter, FacilityFilter
from .interfaces import BookingStore

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking], BookingStore):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def get_with_slots(self, booking_id: str) -> Optional[Booking]:
        query = (
            self._apply_eager_loading(self.db.query(Booking))
            .options(selectinload(Booking.slots))
            .filter(Booking.id == booking_id)
        )
        return self._execute_first(query, f"booking {booking_id}")

    def get_for_update(self, booking_id: str) -> Optional[Booking]:
        """
        Lock the booking row for the rest of the transaction.

        SQLite renders no FOR UPDATE clause; its single writer already serialises.
        """
        query = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id)
            .with_for_update()
            .populate_existing()
        )
        return self._execute_first(query, f"locked booking {booking_id}")

    def create_with_slots(
        self, booking_data: Dict[str, Any], slots_data: Sequence[Dict[str, Any]]
    ) -> Booking:
        """
        Insert the booking and its slots with a single flush.

        Note: Does NOT commit - the calling service owns the transaction.
        """
        with self._wrap_errors("create booking with slots"):
            booking = Booking(**booking_data)
            booking.slots = [BookingSlot(**slot_data) for slot_data in slots_data]
            self.db.add(booking)
            self.db.flush()
        self.logger.debug(f"Inserted booking {booking.id} with {len(booking.slots)} slots")
        return booking

    def find_page(self, booking_filter: BookingFilter, *, skip: int, limit: int) -> List[Booking]:
        query = (
            self._apply_eager_loading(self.db.query(Booking))
            .options(selectinload(Booking.slots))
            .filter(booking_filter.to_clause())
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return self._execute_query(query)

    def count_matching(self, booking_filter: BookingFilter) -> int:
        query = self.db.query(func.count(Booking.id)).filter(booking_filter.to_clause())
        return int(self._execute_scalar(query) or 0)

    def find_by_court_in_range(
        self, facility_id: str, court_id: str, start: datetime, end: datetime
    ) -> List[Booking]:
        booking_filter = AllOf.of(
            FacilityFilter(facility_id),
            CourtIdFilter(court_id),
            DateRangeFilter(start=start, end=end),
        )
        query = (
            self._apply_eager_loading(self.db.query(Booking))
            .filter(booking_filter.to_clause())
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return self._execute_query(query)

    def update_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        return self.update(booking_id, status=BookingStatus(status).value)

    def status_totals(self, booking_filter: BookingFilter) -> Dict[str, Tuple[int, int]]:
        """Count bookings and sum total price per status, aggregated in SQL."""
        query = (
            self.db.query(
                Booking.status,
                func.count(Booking.id).label("count"),
                func.coalesce(func.sum(Booking.total_price), 0).label("revenue"),
            )
            .filter(booking_filter.to_clause())
            .group_by(Booking.status)
        )
        rows = self._execute_query(query)
        return {status: (int(count), int(revenue)) for status, count, revenue in rows}

    def find_for_analytics(
        self, booking_filter: BookingFilter, start: datetime, end: datetime
    ) -> List[Tuple[datetime, int]]:
        query = (
            self.db.query(Booking.start_at, Booking.total_price)
            .filter(
                booking_filter.to_clause(),
                Booking.start_at >= ensure_utc(start),
                Booking.start_at <= ensure_utc(end),
            )
            .order_by(Booking.start_at)
        )
        rows = self._execute_query(query)
        return [(start_at, int(total_price)) for start_at, total_price in rows]

    def court_totals(self, booking_filter: BookingFilter) -> Dict[str, Tuple[int, int]]:
        query = (
            self.db.query(
                Booking.court_id,
                func.count(Booking.id),
                func.coalesce(func.sum(Booking.total_price), 0),
            )
            .filter(booking_filter.to_clause())
            .group_by(Booking.court_id)
        )
        rows = self._execute_query(query)
        return {court_id: (int(count), int(revenue)) for court_id, count, revenue in rows}

    def _apply_eager_loading(self, query: Query) -> Query:
        """Load the player, court and facility used by booking responses."""
        return query.options(
            joinedload(Booking.player),
            joinedload(Booking.court),
            joinedload(Booking.facility),
        )

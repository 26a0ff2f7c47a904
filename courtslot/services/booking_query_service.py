# courtslot/services/booking_query_service.py
"""
Booking reads for the owner calendar and the player's own history.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
import math
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.enums import BookingViewType
from ..core.exceptions import NotFoundException
from ..models.booking import BookingSlot
from ..repositories.booking_filters import (
    AllOf,
    BookingFilter,
    CourtIdFilter,
    DateRangeFilter,
    FacilityFilter,
    PlayerIdFilter,
    StatusFilter,
    search_filter,
)
from ..repositories.factory import RepositoryFactory
from ..repositories.interfaces import BookingSlotStore, BookingStore
from ..schemas.booking import BookingListFilters, BookingResponse, BookingsPageResponse
from .base import BaseService
from .view_range import resolve_view_range, today_in

logger = logging.getLogger(__name__)


class BookingQueryService(BaseService):
    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingStore] = None,
        slot_repository: Optional[BookingSlotStore] = None,
        config: Optional[Settings] = None,
    ):
        super().__init__(db, config)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.slot_repository = slot_repository or RepositoryFactory.create_booking_slot_repository(
            db
        )
        self.court_repository = RepositoryFactory.create_court_repository(db)

    @BaseService.measure_operation("bookings.by_court")
    def get_bookings_by_court(
        self,
        facility_id: str,
        court_id: str,
        view_type: Union[BookingViewType, str] = BookingViewType.DAY,
        anchor: Optional[Union[date, datetime]] = None,
    ) -> List[BookingResponse]:
        """
        Bookings on one court for a calendar view.

        Each booking only carries its slots that start inside the view range.
        """
        if self.court_repository.find_in_facility(court_id, facility_id) is None:
            raise NotFoundException(
                "Court not found or does not belong to this facility",
                details={"court_id": court_id, "facility_id": facility_id},
            )

        tz = self.settings.tzinfo
        view_range = resolve_view_range(view_type, anchor or today_in(tz), tz)
        bookings = self.booking_repository.find_by_court_in_range(
            facility_id, court_id, view_range.start, view_range.end
        )

        slots_by_booking: Dict[str, List[BookingSlot]] = {}
        for slot in self.slot_repository.find_in_range(
            [booking.id for booking in bookings], view_range.start, view_range.end
        ):
            slots_by_booking.setdefault(slot.booking_id, []).append(slot)

        return [
            BookingResponse.from_booking(booking, slots=slots_by_booking.get(booking.id, []))
            for booking in bookings
        ]

    @BaseService.measure_operation("bookings.list_facility")
    def list_facility_bookings(
        self,
        facility_id: str,
        filters: BookingListFilters,
        view_type: Optional[Union[BookingViewType, str]] = None,
        anchor: Optional[Union[date, datetime]] = None,
    ) -> BookingsPageResponse:
        """
        Filtered, paginated bookings of a facility, newest first.

        A view range (view type plus anchor) takes precedence over the
        start/end date filters.
        """
        booking_filter = AllOf.of(
            FacilityFilter(facility_id),
            self._build_filter(filters, view_type, anchor),
        )
        return self._page(booking_filter, filters)

    @BaseService.measure_operation("bookings.list_player")
    def list_player_bookings(
        self, player_id: str, filters: BookingListFilters
    ) -> BookingsPageResponse:
        booking_filter = AllOf.of(
            PlayerIdFilter(player_id),
            self._build_filter(filters.model_copy(update={"player_id": None})),
        )
        return self._page(booking_filter, filters)

    def get_player_booking(self, player_id: str, booking_id: str) -> BookingResponse:
        booking = self.booking_repository.get_with_slots(booking_id)
        if booking is None or booking.player_id != player_id:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return BookingResponse.from_booking(booking)

    def _build_filter(
        self,
        filters: BookingListFilters,
        view_type: Optional[Union[BookingViewType, str]] = None,
        anchor: Optional[Union[date, datetime]] = None,
    ) -> AllOf:
        date_filter: Optional[DateRangeFilter] = None
        if view_type is not None and anchor is not None:
            view_range = resolve_view_range(view_type, anchor, self.settings.tzinfo)
            date_filter = DateRangeFilter(start=view_range.start, end=view_range.end)
        elif filters.start_date is not None or filters.end_date is not None:
            date_filter = DateRangeFilter(start=filters.start_date, end=filters.end_date)

        parts: List[Optional[BookingFilter]] = [
            CourtIdFilter(filters.court_id) if filters.court_id else None,
            PlayerIdFilter(filters.player_id) if filters.player_id else None,
            StatusFilter(filters.status) if filters.status else None,
            date_filter,
            search_filter(filters.search),
        ]
        return AllOf.of(*parts)

    def _page(self, booking_filter: BookingFilter, filters: BookingListFilters) -> BookingsPageResponse:
        page_size = filters.limit or self.settings.default_page_size
        limit = min(page_size, self.settings.max_page_size)
        skip = (filters.page - 1) * limit

        total = self.booking_repository.count_matching(booking_filter)
        bookings = self.booking_repository.find_page(booking_filter, skip=skip, limit=limit)

        return BookingsPageResponse(
            bookings=[BookingResponse.from_booking(booking) for booking in bookings],
            total=total,
            page=filters.page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

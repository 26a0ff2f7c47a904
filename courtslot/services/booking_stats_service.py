# courtslot/services/booking_stats_service.py
"""
Booking statistics and analytics for facility owners.

Revenue figures sum ``total_price`` across every status, cancelled
bookings included, so the numbers match what was originally booked.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
import logging
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.enums import BookingViewType
from ..models.booking import BookingStatus
from ..repositories.booking_filters import AllOf, DateRangeFilter, FacilityFilter
from ..repositories.factory import RepositoryFactory
from ..repositories.interfaces import BookingSlotStore, BookingStore
from ..schemas.booking import (
    BookingStatsResponse,
    CourtUtilization,
    CourtUtilizationResponse,
    PopularSlot,
    PopularSlotsResponse,
    TimeAnalyticsResponse,
)
from .base import BaseService
from .view_range import resolve_view_range, today_in

logger = logging.getLogger(__name__)

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class BookingStatsService(BaseService):
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

    @BaseService.measure_operation("bookings.stats")
    def get_stats(
        self,
        facility_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> BookingStatsResponse:
        """
        Count bookings per status and total their revenue.

        Dates restrict to bookings with a slot starting inside the range;
        either bound may be omitted.
        """
        booking_filter = AllOf.of(
            FacilityFilter(facility_id),
            DateRangeFilter(start=start_date, end=end_date),
        )
        totals = self.booking_repository.status_totals(booking_filter)

        total_bookings = sum(count for count, _ in totals.values())
        total_revenue = sum(revenue for _, revenue in totals.values())

        def _count(status: BookingStatus) -> int:
            return totals.get(status.value, (0, 0))[0]

        return BookingStatsResponse(
            total_bookings=total_bookings,
            confirmed_bookings=_count(BookingStatus.CONFIRMED),
            cancelled_bookings=_count(BookingStatus.CANCELLED),
            pending_bookings=_count(BookingStatus.PENDING),
            total_revenue=total_revenue,
            average_booking_value=total_revenue / total_bookings if total_bookings > 0 else 0.0,
        )

    @BaseService.measure_operation("bookings.analytics.by_time")
    def get_time_analytics(
        self,
        facility_id: str,
        period: Union[BookingViewType, str] = BookingViewType.WEEK,
        anchor: Optional[Union[date, datetime]] = None,
    ) -> TimeAnalyticsResponse:
        """
        Bucket bookings by when they start.

        DAY yields 24 hourly buckets, WEEK seven daily buckets from Sunday,
        MONTH one bucket per seven-day block of the month.
        """
        tz = self.settings.tzinfo
        period = BookingViewType(period)
        view_range = resolve_view_range(period, anchor or today_in(tz), tz)

        if period is BookingViewType.DAY:
            labels = [f"{hour}:00" for hour in range(24)]
        elif period is BookingViewType.WEEK:
            labels = list(WEEKDAY_LABELS)
        else:
            weeks = (view_range.end.day - 1) // 7 + 1
            labels = [f"Week {index}" for index in range(1, weeks + 1)]

        data = [0] * len(labels)
        revenue = [0] * len(labels)
        rows = self.booking_repository.find_for_analytics(
            FacilityFilter(facility_id), view_range.start, view_range.end
        )
        for start_at, total_price in rows:
            local = start_at.astimezone(tz)
            if period is BookingViewType.DAY:
                bucket = local.hour
            elif period is BookingViewType.WEEK:
                bucket = (local.date() - view_range.start.date()).days
            else:
                bucket = (local.day - 1) // 7
            data[bucket] += 1
            revenue[bucket] += total_price

        return TimeAnalyticsResponse(
            period=period,
            start=view_range.start,
            end=view_range.end,
            labels=labels,
            data=data,
            revenue=revenue,
        )

    @BaseService.measure_operation("bookings.analytics.popular_slots")
    def get_popular_time_slots(
        self,
        facility_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> PopularSlotsResponse:
        """Active slot count and revenue per starting hour of the day."""
        tz = self.settings.tzinfo
        first_hour = self.settings.analytics_first_hour
        counts = {hour: 0 for hour in range(first_hour, 24)}
        revenue = {hour: 0 for hour in range(first_hour, 24)}

        for _court_id, start_time, _end_time, unit_price in self.slot_repository.find_active_windows(
            facility_id, start_date, end_date
        ):
            hour = start_time.astimezone(tz).hour
            if hour in counts:
                counts[hour] += 1
                revenue[hour] += unit_price

        return PopularSlotsResponse(
            slots=[
                PopularSlot(hour=hour, label=f"{hour}:00", count=counts[hour], revenue=revenue[hour])
                for hour in counts
            ]
        )

    @BaseService.measure_operation("bookings.analytics.court_utilization")
    def get_court_utilization(
        self,
        facility_id: str,
        start_date: date,
        end_date: date,
    ) -> CourtUtilizationResponse:
        """
        Per-court bookings, revenue and share of bookable time that is booked.

        The range covers whole days from ``start_date`` to ``end_date``
        inclusive, in the facility timezone.
        """
        tz = self.settings.tzinfo
        if end_date < start_date:
            start_date, end_date = end_date, start_date
        start = resolve_view_range(BookingViewType.DAY, start_date, tz).start
        end = resolve_view_range(BookingViewType.DAY, end_date, tz).end
        days = (end_date - start_date).days + 1
        bookable_minutes = days * self.settings.operating_hours_per_day * 60

        totals = self.booking_repository.court_totals(
            AllOf.of(FacilityFilter(facility_id), DateRangeFilter(start=start, end=end))
        )
        booked_minutes = {}
        for court_id, start_time, end_time, _price in self.slot_repository.find_active_windows(
            facility_id, start, end
        ):
            minutes = int((end_time - start_time) / timedelta(minutes=1))
            booked_minutes[court_id] = booked_minutes.get(court_id, 0) + minutes

        courts: List[CourtUtilization] = []
        for court in self.court_repository.list_for_facility(facility_id):
            count, court_revenue = totals.get(court.id, (0, 0))
            minutes = booked_minutes.get(court.id, 0)
            courts.append(
                CourtUtilization(
                    court_id=court.id,
                    court_name=court.name,
                    total_bookings=count,
                    revenue=court_revenue,
                    booked_minutes=minutes,
                    utilization_rate=round(minutes / bookable_minutes * 100, 1),
                )
            )

        return CourtUtilizationResponse(start=start, end=end, courts=courts)

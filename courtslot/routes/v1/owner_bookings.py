# courtslot/routes/v1/owner_bookings.py
"""
Facility owner booking routes - API v1

Versioned endpoints under /api/v1/facilities/{facility_id}/bookings.
All business logic delegated to the booking services.

Endpoints:
    POST / - Create a booking with its slots
    GET / - List facility bookings with filters and pagination
    GET /stats - Booking statistics
    GET /analytics/by-time - Bookings and revenue bucketed by time
    GET /analytics/popular-slots - Busiest starting hours
    GET /analytics/court-utilization - Per-court utilization
    GET /courts/{court_id} - Bookings on one court for a calendar view
    POST /slots/{slot_id}/cancel - Cancel one booking slot
"""

import asyncio
from datetime import date, datetime
import logging
from typing import List, NoReturn, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, status

from ...api.dependencies import (
    get_acting_user_id,
    get_booking_cancellation_service,
    get_booking_creation_service,
    get_booking_query_service,
    get_booking_stats_service,
)
from ...core.enums import BookingViewType
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...schemas.booking import (
    BookingCreate,
    BookingListFilters,
    BookingResponse,
    BookingsPageResponse,
    BookingStatsResponse,
    CancelSlotRequest,
    CancelSlotResponse,
    CourtUtilizationResponse,
    PopularSlotsResponse,
    TimeAnalyticsResponse,
)
from ...services.booking_cancellation_service import BookingCancellationService
from ...services.booking_creation_service import BookingCreationService
from ...services.booking_query_service import BookingQueryService
from ...services.booking_stats_service import BookingStatsService
from ...services.view_range import today_in

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facilities/{facility_id}/bookings", tags=["owner-bookings"])

FACILITY_LIST_VIEWS = {BookingViewType.DAY, BookingViewType.WEEK}


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Re-raise a domain error as the HTTP error its class maps to."""
    logger.info(f"{exc.code}: {exc.message}")
    raise exc.to_http_exception() from exc


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid slots"},
        404: {"description": "Court or player not found"},
        409: {"description": "Slots overlap an existing booking"},
    },
)
async def create_booking(
    facility_id: str,
    booking_data: BookingCreate = Body(...),
    creation_service: BookingCreationService = Depends(get_booking_creation_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            creation_service.create_booking, facility_id, booking_data
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=BookingsPageResponse)
async def list_bookings(
    facility_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    court_id: Optional[str] = Query(None, alias="courtId"),
    player_id: Optional[str] = Query(None, alias="playerId"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    view: Optional[BookingViewType] = Query(None),
    query_service: BookingQueryService = Depends(get_booking_query_service),
) -> BookingsPageResponse:
    """
    List facility bookings.

    Only day and week views apply here; the view is anchored on ``startDate``
    (or today) and replaces the start/end date filters.
    """
    try:
        filters = BookingListFilters(
            page=page,
            limit=limit,
            court_id=court_id,
            player_id=player_id,
            status=booking_status,
            search=search,
            start_date=start_date,
            end_date=end_date,
        )
        view_type: Optional[BookingViewType] = None
        anchor: Optional[Union[date, datetime]] = None
        if view in FACILITY_LIST_VIEWS:
            view_type = view
            anchor = start_date or today_in(query_service.settings.tzinfo)

        return await asyncio.to_thread(
            query_service.list_facility_bookings, facility_id, filters, view_type, anchor
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/stats", response_model=BookingStatsResponse)
async def get_booking_stats(
    facility_id: str,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    stats_service: BookingStatsService = Depends(get_booking_stats_service),
) -> BookingStatsResponse:
    try:
        return await asyncio.to_thread(stats_service.get_stats, facility_id, start_date, end_date)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/analytics/by-time", response_model=TimeAnalyticsResponse)
async def get_time_analytics(
    facility_id: str,
    period: BookingViewType = Query(BookingViewType.WEEK),
    anchor: Optional[date] = Query(None, alias="date"),
    stats_service: BookingStatsService = Depends(get_booking_stats_service),
) -> TimeAnalyticsResponse:
    try:
        return await asyncio.to_thread(
            stats_service.get_time_analytics, facility_id, period, anchor
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/analytics/popular-slots", response_model=PopularSlotsResponse)
async def get_popular_time_slots(
    facility_id: str,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    stats_service: BookingStatsService = Depends(get_booking_stats_service),
) -> PopularSlotsResponse:
    try:
        return await asyncio.to_thread(
            stats_service.get_popular_time_slots, facility_id, start_date, end_date
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/analytics/court-utilization", response_model=CourtUtilizationResponse)
async def get_court_utilization(
    facility_id: str,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    stats_service: BookingStatsService = Depends(get_booking_stats_service),
) -> CourtUtilizationResponse:
    try:
        return await asyncio.to_thread(
            stats_service.get_court_utilization, facility_id, start_date, end_date
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/courts/{court_id}", response_model=List[BookingResponse])
async def get_court_bookings(
    facility_id: str,
    court_id: str,
    view: BookingViewType = Query(BookingViewType.DAY),
    anchor: Optional[datetime] = Query(None, alias="startDate"),
    query_service: BookingQueryService = Depends(get_booking_query_service),
) -> List[BookingResponse]:
    try:
        return await asyncio.to_thread(
            query_service.get_bookings_by_court, facility_id, court_id, view, anchor
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/slots/{slot_id}/cancel", response_model=CancelSlotResponse)
async def cancel_booking_slot(
    facility_id: str,
    slot_id: str,
    payload: CancelSlotRequest = Body(...),
    acting_user_id: str = Depends(get_acting_user_id),
    cancellation_service: BookingCancellationService = Depends(get_booking_cancellation_service),
) -> CancelSlotResponse:
    try:
        await asyncio.to_thread(
            cancellation_service.cancel_slot, slot_id, facility_id, payload.reason, acting_user_id
        )
        return CancelSlotResponse()
    except DomainException as e:
        handle_domain_exception(e)

# courtslot/routes/v1/player_bookings.py
"""
Player booking routes - API v1

Endpoints:
    GET /players/{player_id}/bookings - The player's bookings across facilities
    GET /players/{player_id}/bookings/{booking_id} - One of the player's bookings
"""

import asyncio
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_booking_query_service
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...schemas.booking import BookingListFilters, BookingResponse, BookingsPageResponse
from ...services.booking_query_service import BookingQueryService
from .owner_bookings import handle_domain_exception

router = APIRouter(prefix="/players/{player_id}/bookings", tags=["player-bookings"])


@router.get("", response_model=BookingsPageResponse)
async def list_my_bookings(
    player_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    query_service: BookingQueryService = Depends(get_booking_query_service),
) -> BookingsPageResponse:
    try:
        filters = BookingListFilters(
            page=page,
            limit=limit,
            status=booking_status,
            start_date=start_date,
            end_date=end_date,
        )
        return await asyncio.to_thread(query_service.list_player_bookings, player_id, filters)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_my_booking(
    player_id: str,
    booking_id: str,
    query_service: BookingQueryService = Depends(get_booking_query_service),
) -> BookingResponse:
    try:
        return await asyncio.to_thread(query_service.get_player_booking, player_id, booking_id)
    except DomainException as e:
        handle_domain_exception(e)

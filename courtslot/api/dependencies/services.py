"""
Service dependency factories.

Each request gets services bound to its own database session.
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from ...core.ulid_helper import is_valid_ulid
from ...services.booking_cancellation_service import BookingCancellationService
from ...services.booking_creation_service import BookingCreationService
from ...services.booking_query_service import BookingQueryService
from ...services.booking_stats_service import BookingStatsService
from .database import get_db


def get_booking_creation_service(db: Session = Depends(get_db)) -> BookingCreationService:
    return BookingCreationService(db)


def get_booking_query_service(db: Session = Depends(get_db)) -> BookingQueryService:
    return BookingQueryService(db)


def get_booking_cancellation_service(
    db: Session = Depends(get_db),
) -> BookingCancellationService:
    return BookingCancellationService(db)


def get_booking_stats_service(db: Session = Depends(get_db)) -> BookingStatsService:
    return BookingStatsService(db)


def get_acting_user_id(
    acting_user_id: str = Header(..., alias="X-Acting-User-Id"),
) -> str:
    """
    Identity of the caller, resolved upstream by the authentication layer.
    """
    if not is_valid_ulid(acting_user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Acting-User-Id must be a valid ULID",
        )
    return acting_user_id

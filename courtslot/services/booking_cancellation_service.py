# courtslot/services/booking_cancellation_service.py
"""
Slot cancellation and the booking status cascade.

The parent booking row is locked before the slot is written, so concurrent
cancellations of sibling slots serialise and the last one to commit always
sees every sibling's status when deciding whether the booking is cancelled.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.exceptions import NotFoundException, ValidationException
from ..models.booking import BookingStatus
from ..models.types import utc_now
from ..repositories.factory import RepositoryFactory
from ..repositories.interfaces import BookingSlotStore, BookingStore
from .base import BaseService

logger = logging.getLogger(__name__)


class BookingCancellationService(BaseService):
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
        self.user_repository = RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("bookings.cancel_slot")
    def cancel_slot(
        self, slot_id: str, facility_id: str, reason: str, cancelled_by: Optional[str]
    ) -> None:
        """
        Cancel one slot and cancel its booking once no active slot remains.

        Raises:
            ValidationException: Blank reason
            NotFoundException: Slot missing or booked at another facility, or
                the acting user does not exist
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationException("Cancellation reason cannot be empty")
        if cancelled_by is not None and self.user_repository.get_by_id(cancelled_by) is None:
            raise NotFoundException("Acting user not found", details={"user_id": cancelled_by})

        self.log_operation(
            "cancel_slot", slot_id=slot_id, facility_id=facility_id, cancelled_by=cancelled_by
        )

        with self.transaction():
            slot = self.slot_repository.find_for_facility(slot_id, facility_id)
            if slot is None:
                raise NotFoundException(
                    "Booking slot not found or does not belong to this facility",
                    details={"slot_id": slot_id, "facility_id": facility_id},
                )
            booking_id = slot.booking_id

            self.booking_repository.get_for_update(booking_id)

            self.slot_repository.update(
                slot_id,
                status=BookingStatus.CANCELLED.value,
                cancel_reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=utc_now(),
            )

            slots = self.slot_repository.list_for_booking(booking_id)
            if slots and all(s.status == BookingStatus.CANCELLED for s in slots):
                self.booking_repository.update_status(booking_id, BookingStatus.CANCELLED)
                self.logger.info(f"All slots cancelled, booking {booking_id} marked cancelled")

# courtslot/services/booking_creation_service.py
"""
Booking creation.

A booking is written as one unit: the booking row and all of its slots are
inserted in a single transaction, or nothing is.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.exceptions import BookingConflictException, NotFoundException, ValidationException
from ..models.booking import Booking, BookingStatus
from ..models.types import ensure_utc
from ..repositories.factory import RepositoryFactory
from ..repositories.interfaces import BookingSlotStore, BookingStore
from ..schemas.booking import BookingCreate, SlotWindow
from .base import BaseService

logger = logging.getLogger(__name__)


class BookingCreationService(BaseService):
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
        self.user_repository = RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("bookings.create")
    def create_booking(self, facility_id: str, booking_data: BookingCreate) -> Booking:
        """
        Create a confirmed booking with one confirmed slot per requested window.

        Args:
            facility_id: Facility the court must belong to
            booking_data: Court, player, slots and pricing

        Returns:
            The persisted booking with its slots

        Raises:
            ValidationException: No slots, or slots out of order / overlapping
            NotFoundException: Court not in facility, or player missing
            BookingConflictException: Slots overlap an active booking (when enforced)
        """
        self.log_operation(
            "create_booking",
            facility_id=facility_id,
            court_id=booking_data.court_id,
            player_id=booking_data.player_id,
            slot_count=len(booking_data.slots),
        )

        windows = self._validate_slots(booking_data.slots)

        court = self.court_repository.find_in_facility(booking_data.court_id, facility_id)
        if court is None:
            raise NotFoundException(
                "Court not found or does not belong to this facility",
                details={"court_id": booking_data.court_id, "facility_id": facility_id},
            )

        player = self.user_repository.find_player(booking_data.player_id)
        if player is None:
            raise NotFoundException(
                "Player not found", details={"player_id": booking_data.player_id}
            )

        if self.settings.enforce_slot_conflicts:
            self._check_conflicts(court.id, windows)

        booking_fields = {
            "player_id": player.id,
            "facility_id": facility_id,
            "court_id": court.id,
            "status": BookingStatus.CONFIRMED.value,
            "start_at": windows[0][0],
            "end_at": windows[-1][1],
            "slot_minutes": booking_data.slot_minutes or court.slot_minutes,
            "unit_price": booking_data.unit_price,
            "total_price": booking_data.total_price,
            "is_recurrence": booking_data.is_recurrence,
            "notes": booking_data.notes,
        }
        slot_fields = [
            {
                "court_id": court.id,
                "start_time": start,
                "end_time": end,
                "status": BookingStatus.CONFIRMED.value,
                "created_by": player.id,
            }
            for start, end in windows
        ]

        with self.transaction():
            booking = self.booking_repository.create_with_slots(booking_fields, slot_fields)

        self.logger.info(
            f"Created booking {booking.id} on court {court.id} with {len(slot_fields)} slots"
        )
        return booking

    def _validate_slots(self, slots: Sequence[SlotWindow]) -> List[Tuple[datetime, datetime]]:
        if not slots:
            raise ValidationException("At least one slot is required")

        windows = [(ensure_utc(slot.start_time), ensure_utc(slot.end_time)) for slot in slots]
        previous_end: Optional[datetime] = None
        for index, (start, end) in enumerate(windows):
            if end <= start:
                raise ValidationException(
                    "Slot end time must be after its start time",
                    details={"slot_index": index},
                )
            if previous_end is not None and start < previous_end:
                raise ValidationException(
                    "Slots must be in chronological order and must not overlap",
                    details={"slot_index": index},
                )
            previous_end = end
        return windows

    def _check_conflicts(self, court_id: str, windows: Sequence[Tuple[datetime, datetime]]) -> None:
        conflicts = self.slot_repository.find_overlapping(court_id, windows)
        if conflicts:
            raise BookingConflictException(
                details={
                    "court_id": court_id,
                    "conflicting_slot_ids": [slot.id for slot in conflicts],
                }
            )

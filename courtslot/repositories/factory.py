# courtslot/repositories/factory.py
"""
Repository Factory

Provides centralized creation of repository instances so services get
consistently initialised stores.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .booking_slot_repository import BookingSlotRepository
    from .court_repository import CourtRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_booking_slot_repository(db: Session) -> "BookingSlotRepository":
        """Create repository for booking slot operations."""
        from .booking_slot_repository import BookingSlotRepository

        return BookingSlotRepository(db)

    @staticmethod
    def create_court_repository(db: Session) -> "CourtRepository":
        from .court_repository import CourtRepository

        return CourtRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

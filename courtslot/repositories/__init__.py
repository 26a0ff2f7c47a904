"""
Repository layer for booking engine data access.

Key Components:
- BaseRepository: generic read/create/update helpers (no hard deletes)
- BookingStore / BookingSlotStore: explicit per-entity interfaces
- BookingRepository / BookingSlotRepository: SQLAlchemy implementations
- CourtRepository / UserRepository: read-only reference lookups
- RepositoryFactory: factory for creating repository instances

Usage:
    from courtslot.repositories import RepositoryFactory

    repository = RepositoryFactory.create_booking_repository(db)
    bookings = repository.find_page(AllOf.of(FacilityFilter(facility_id)), skip=0, limit=20)
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .booking_slot_repository import BookingSlotRepository
from .court_repository import CourtRepository
from .factory import RepositoryFactory
from .interfaces import BookingSlotStore, BookingStore
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "BookingSlotRepository",
    "BookingSlotStore",
    "BookingStore",
    "CourtRepository",
    "IRepository",
    "RepositoryFactory",
    "UserRepository",
]

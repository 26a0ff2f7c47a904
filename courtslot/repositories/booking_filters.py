# courtslot/repositories/booking_filters.py
"""
Typed filter variants for booking queries.

Each variant compiles itself to a SQLAlchemy clause over ``Booking``.
Variants compose with ``AllOf`` / ``AnyOf`` so callers never pass
free-form criteria maps to the stores.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement

from ..models.booking import Booking, BookingSlot, BookingStatus
from ..models.court import Court
from ..models.types import ensure_utc
from ..models.user import User


@dataclass(frozen=True)
class FacilityFilter:
    facility_id: str

    def to_clause(self) -> ColumnElement[bool]:
        return Booking.facility_id == self.facility_id


@dataclass(frozen=True)
class CourtIdFilter:
    court_id: str

    def to_clause(self) -> ColumnElement[bool]:
        return Booking.court_id == self.court_id


@dataclass(frozen=True)
class PlayerIdFilter:
    player_id: str

    def to_clause(self) -> ColumnElement[bool]:
        return Booking.player_id == self.player_id


@dataclass(frozen=True)
class StatusFilter:
    status: BookingStatus

    def to_clause(self) -> ColumnElement[bool]:
        return Booking.status == BookingStatus(self.status).value


@dataclass(frozen=True)
class DateRangeFilter:
    """
    Matches bookings with at least one slot starting inside the inclusive range.

    Either bound may be open. With neither bound the filter matches everything.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def slot_clause(self) -> ColumnElement[bool]:
        conditions = []
        if self.start is not None:
            conditions.append(BookingSlot.start_time >= ensure_utc(self.start))
        if self.end is not None:
            conditions.append(BookingSlot.start_time <= ensure_utc(self.end))
        if not conditions:
            return true()
        return and_(*conditions)

    def to_clause(self) -> ColumnElement[bool]:
        if self.is_open:
            return true()
        return Booking.slots.any(self.slot_clause())


@dataclass(frozen=True)
class PlayerNameFilter:
    """Case-insensitive substring match on the player's full name."""

    term: str

    def to_clause(self) -> ColumnElement[bool]:
        return Booking.player.has(User.full_name.icontains(self.term, autoescape=True))


@dataclass(frozen=True)
class CourtNameFilter:
    """Case-insensitive substring match on the court's name."""

    term: str

    def to_clause(self) -> ColumnElement[bool]:
        return Booking.court.has(Court.name.icontains(self.term, autoescape=True))


@dataclass(frozen=True)
class AllOf:
    filters: Tuple["BookingFilter", ...]

    @classmethod
    def of(cls, *filters: Optional["BookingFilter"]) -> "AllOf":
        """Build a conjunction, skipping ``None`` entries."""
        return cls(tuple(f for f in filters if f is not None))

    def to_clause(self) -> ColumnElement[bool]:
        if not self.filters:
            return true()
        return and_(*(f.to_clause() for f in self.filters))


@dataclass(frozen=True)
class AnyOf:
    filters: Tuple["BookingFilter", ...]

    @classmethod
    def of(cls, *filters: Optional["BookingFilter"]) -> "AnyOf":
        return cls(tuple(f for f in filters if f is not None))

    def to_clause(self) -> ColumnElement[bool]:
        if not self.filters:
            return false()
        return or_(*(f.to_clause() for f in self.filters))


BookingFilter = Union[
    FacilityFilter,
    CourtIdFilter,
    PlayerIdFilter,
    StatusFilter,
    DateRangeFilter,
    PlayerNameFilter,
    CourtNameFilter,
    AllOf,
    AnyOf,
]


def search_filter(term: Optional[str]) -> Optional[AnyOf]:
    """Player name OR court name match; ``None`` for a blank term."""
    if term is None or not term.strip():
        return None
    term = term.strip()
    return AnyOf.of(PlayerNameFilter(term), CourtNameFilter(term))


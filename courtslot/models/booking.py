# courtslot/models/booking.py
"""
Booking and booking slot models.

A booking groups one or more contiguous slots on a single court. The
booking and its slots are created together; afterwards only slot
cancellation mutates them, and the booking's status follows its slots
(CANCELLED exactly when every slot is CANCELLED).
"""

from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now

_STATUS_CHECK = (
    "status IN ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED', 'NO_SHOW', 'EXPIRED', 'REFUNDED')"
)


class BookingStatus(str, Enum):
    """Lifecycle statuses shared by bookings and their slots."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"
    EXPIRED = "EXPIRED"
    REFUNDED = "REFUNDED"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    player_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    facility_id = Column(String(26), ForeignKey("facilities.id"), nullable=False, index=True)
    court_id = Column(String(26), ForeignKey("courts.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED, index=True)

    # Span of the slots at creation time
    start_at = Column(UTCDateTime, nullable=False)
    end_at = Column(UTCDateTime, nullable=False)

    slot_minutes = Column(Integer, nullable=False)
    unit_price = Column(Integer, nullable=False)
    total_price = Column(Integer, nullable=False)
    is_recurrence = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    player = relationship("User", foreign_keys=[player_id])
    facility = relationship("Facility")
    court = relationship("Court")
    slots = relationship(
        "BookingSlot",
        back_populates="booking",
        order_by="BookingSlot.start_time",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="ck_bookings_status"),
        CheckConstraint("slot_minutes > 0", name="check_booking_slot_minutes_positive"),
        CheckConstraint("unit_price >= 0", name="check_unit_price_non_negative"),
        CheckConstraint("total_price >= 0", name="check_total_price_non_negative"),
        CheckConstraint("start_at < end_at", name="check_booking_span_order"),
        Index("ix_bookings_facility_created", "facility_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: player={self.player_id}, court={self.court_id}, "
            f"span={self.start_at}-{self.end_at}, status={self.status}>"
        )


class BookingSlot(Base):
    __tablename__ = "booking_slots"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    booking_id = Column(String(26), ForeignKey("bookings.id"), nullable=False, index=True)
    court_id = Column(String(26), ForeignKey("courts.id"), nullable=False)

    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED)

    created_by = Column(String(26), ForeignKey("users.id"), nullable=True)

    # Cancellation tracking
    cancel_reason = Column(Text, nullable=True)
    cancelled_by = Column(String(26), ForeignKey("users.id"), nullable=True)
    cancelled_at = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    booking = relationship("Booking", back_populates="slots")

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="ck_booking_slots_status"),
        CheckConstraint("start_time < end_time", name="check_slot_time_order"),
        Index("ix_booking_slots_court_start", "court_id", "start_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookingSlot {self.id}: booking={self.booking_id}, "
            f"time={self.start_time}-{self.end_time}, status={self.status}>"
        )

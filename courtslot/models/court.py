# courtslot/models/court.py
"""
Facility and court reference models.

Facilities own courts. Both are maintained by the venue management side
and are read-only from the booking engine's point of view.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now


class Facility(Base):
    __tablename__ = "facilities"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    courts = relationship("Court", back_populates="facility", order_by="Court.name")

    def __repr__(self) -> str:
        return f"<Facility {self.id}: {self.name}>"


class Court(Base):
    __tablename__ = "courts"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    facility_id = Column(String(26), ForeignKey("facilities.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    sport = Column(String(50), nullable=True)
    surface = Column(String(50), nullable=True)
    indoor = Column(Boolean, nullable=False, default=False)
    slot_minutes = Column(Integer, nullable=False, default=60)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    facility = relationship("Facility", back_populates="courts")

    __table_args__ = (CheckConstraint("slot_minutes > 0", name="check_court_slot_minutes_positive"),)

    def __repr__(self) -> str:
        return f"<Court {self.id}: {self.name} facility={self.facility_id}>"

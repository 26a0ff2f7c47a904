# courtslot/models/user.py
"""User reference model. Users are managed elsewhere and only read here."""

from sqlalchemy import CheckConstraint, Column, String

from ..core.enums import RoleName
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=True)
    role = Column(String(20), nullable=False, default=RoleName.PLAYER, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    __table_args__ = (
        CheckConstraint("role IN ('PLAYER', 'OWNER', 'ADMIN')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} ({self.role})>"

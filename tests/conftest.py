import os

os.environ.setdefault("CI", "1")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from courtslot.core.enums import RoleName  # noqa: E402
from courtslot.database import Base  # noqa: E402

# Import models so Base.metadata is populated for create_all.
import courtslot.models  # noqa: F401,E402
from courtslot.models.court import Court, Facility  # noqa: E402
from courtslot.models.user import User  # noqa: E402
from courtslot.schemas.booking import BookingCreate, SlotWindow  # noqa: E402
from courtslot.services.base import BaseService  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(db_engine) -> Session:
    """
    Session on a fresh in-memory database. Services commit for real here.
    """
    SessionLocal = sessionmaker(
        bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _reset_service_metrics():
    yield
    BaseService._class_metrics.clear()


@pytest.fixture
def facility(db: Session) -> Facility:
    facility = Facility(name="Riverside Sports Club")
    db.add(facility)
    db.commit()
    return facility


@pytest.fixture
def other_facility(db: Session) -> Facility:
    facility = Facility(name="Hilltop Arena")
    db.add(facility)
    db.commit()
    return facility


@pytest.fixture
def court(db: Session, facility: Facility) -> Court:
    court = Court(
        facility_id=facility.id,
        name="Center Court",
        sport="tennis",
        surface="hard",
        indoor=False,
        slot_minutes=30,
    )
    db.add(court)
    db.commit()
    return court


@pytest.fixture
def second_court(db: Session, facility: Facility) -> Court:
    court = Court(facility_id=facility.id, name="Clay Court 2", sport="tennis", slot_minutes=60)
    db.add(court)
    db.commit()
    return court


@pytest.fixture
def foreign_court(db: Session, other_facility: Facility) -> Court:
    court = Court(facility_id=other_facility.id, name="Arena Court", sport="padel")
    db.add(court)
    db.commit()
    return court


@pytest.fixture
def player(db: Session) -> User:
    user = User(
        full_name="Jane Doe",
        email="jane@example.com",
        phone="+15550001111",
        role=RoleName.PLAYER.value,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def second_player(db: Session) -> User:
    user = User(full_name="Marco Rossi", email="marco@example.com", role=RoleName.PLAYER.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def owner(db: Session) -> User:
    user = User(full_name="Olivia Owner", email="owner@example.com", role=RoleName.OWNER.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_booking_data():
    """Build a BookingCreate from (start, end) datetime pairs."""

    def _make(court_id: str, player_id: str, windows, unit_price: int = 100, **overrides):
        data = {
            "court_id": court_id,
            "player_id": player_id,
            "slots": [SlotWindow(start_time=start, end_time=end) for start, end in windows],
            "unit_price": unit_price,
            "total_price": overrides.pop("total_price", unit_price * len(windows)),
        }
        data.update(overrides)
        return BookingCreate(**data)

    return _make

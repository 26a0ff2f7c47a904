import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from courtslot import init_db as init_db_module


@pytest.mark.unit
def test_init_db_creates_all_tables(monkeypatch) -> None:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    monkeypatch.setattr(init_db_module, "engine", engine)

    init_db_module.init_db()

    assert set(inspect(engine).get_table_names()) == {
        "bookings",
        "booking_slots",
        "courts",
        "facilities",
        "users",
    }
    engine.dispose()

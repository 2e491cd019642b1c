"""
Pytest configuration file for backend testing.
"""
import sys
from pathlib import Path

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from datetime import datetime
from typing import Generator

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.clock import FixedClock
from core.database import Base

# Import all models to register them with SQLAlchemy
from core.audit_logger import AdminLog  # noqa: F401
from modules.auth.models.user_models import User  # noqa: F401
from modules.restaurants.models.restaurant_models import Restaurant  # noqa: F401
from modules.reservations.models.reservation_models import Reservation  # noqa: F401
from modules.notifications.models.notification_models import Notification  # noqa: F401
from tests.factories.base import bind_session

# "Now" for every test that takes the clock fixture
TEST_NOW = datetime(2030, 6, 1, 8, 0)


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # SQLAlchemy emits BEGIN itself so that SAVEPOINTs behave
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a test database session shared with the factories."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    bind_session(session)

    yield session

    bind_session(None)
    session.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TEST_NOW)

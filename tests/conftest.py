"""
Pytest configuration and fixtures.
Tests run against an in-memory SQLite database and never touch Redis.
"""

import os

# Configure the application BEFORE importing it
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("REALTIME_ENABLED", "false")

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_event_publisher
from app.core.security import create_access_token
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Campsite, Equipment, User
from app.services.booking_service import BookingLedger
from app.services.event_publisher import EventPublisher


class RecordingPublisher(EventPublisher):
    """Publisher double that keeps every event in memory."""

    def __init__(self) -> None:
        super().__init__(redis_url="redis://localhost:6379/15", channel="test", enabled=False)
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def publish(self, event: str, payload: dict[str, Any]) -> bool:
        self.events.append((event, payload))
        return True

    def names(self) -> list[str]:
        return [event for event, _ in self.events]


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def ledger(db, publisher):
    return BookingLedger(db, publisher=publisher)


# ==================== SEED DATA ====================


@pytest.fixture
async def guest(db):
    user = User(email="guest@camp.test", username="guest", role="USER")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def other_guest(db):
    user = User(email="other@camp.test", username="other", role="USER")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def admin(db):
    user = User(email="admin@camp.test", username="admin", role="ADMIN")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def campsite(db):
    site = Campsite(name="Pine Ridge", location="North shore", nightly_price=10000, daily_capacity=10)
    db.add(site)
    await db.commit()
    return site


@pytest.fixture
async def tent(db):
    item = Equipment(name="Tent", price=50000, stock=5)
    db.add(item)
    await db.commit()
    return item


@pytest.fixture
async def stove(db):
    item = Equipment(name="Camping stove", price=15000, stock=3)
    db.add(item)
    await db.commit()
    return item


# ==================== HTTP CLIENT ====================


@pytest.fixture
def auth_headers():
    """Build a bearer header for a seeded user."""

    def build(user: User) -> dict[str, str]:
        token = create_access_token({"sub": str(user.public_id)})
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
async def client(session_factory, publisher):
    """HTTP client bound to the test database and the recording publisher."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_event_publisher] = lambda: publisher
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c
    fastapi_app.dependency_overrides.clear()

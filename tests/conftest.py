import datetime as dt
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from libs.common.clock import FrozenClock
from libs.common.config import Settings
from libs.db.store import InMemoryKeyValueStore
from services.attendance_service.services import AttendanceLedger
from services.equipment_service.services import EquipmentInventory
from services.gateway_service.app.container import ClubContainer, build_container
from services.gateway_service.app.main import create_app
from services.members_service.services import MemberDirectory
from services.payments_service.services import PaymentManager

CLUB_TZ = "America/Sao_Paulo"

# Sunday 2024-03-10, 09:00 local time; dues fall on the 5th
NOW = dt.datetime(2024, 3, 10, 9, 0)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL="sqlite://",
        SCHEDULER_ENABLED=False,
        TIMEZONE=CLUB_TZ,
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW, CLUB_TZ)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


# ---------------------------------------------------------------------------
# Managers wired by hand (no listeners, no scheduler)
# ---------------------------------------------------------------------------


@pytest.fixture
def directory(store, clock) -> MemberDirectory:
    return MemberDirectory(store, clock)


@pytest.fixture
def payments(store, directory, clock) -> PaymentManager:
    return PaymentManager(store, directory, clock)


@pytest.fixture
def ledger(store, directory, clock) -> AttendanceLedger:
    return AttendanceLedger(store, directory, clock)


@pytest.fixture
def inventory(store, directory, clock) -> EquipmentInventory:
    return EquipmentInventory(store, directory, clock)


# ---------------------------------------------------------------------------
# Full container and HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def club(settings, store, clock) -> ClubContainer:
    return build_container(settings=settings, store=store, clock=clock)


@pytest.fixture
def app(settings, store, clock):
    return create_app(settings=settings, store=store, clock=clock)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Client acting as the seeded admin user."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Club-User": "admin"},
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def viewer_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Client acting as a plain ``user`` role (view permissions only)."""
    club = app.state.club
    admin = club.users.find_by_username("admin")
    club.users.create_user(admin, username="viewer", email="viewer@volleyclub.com")
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Club-User": "viewer"},
    ) as ac:
        yield ac

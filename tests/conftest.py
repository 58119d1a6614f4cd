"""Shared test fixtures for EarnPay API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, get_db
from app.core.deps import get_work_time_tracker, get_session_factory
from app.main import app

# Import all models to ensure they're registered with Base.metadata
from app.models.user import User, KycStatus, VerificationStatus, AccountStatus
from app.models.earning import Earning  # noqa: F401
from app.models.notification import Notification  # noqa: F401
from app.models.admin_audit_log import AdminAuditLog  # noqa: F401
from app.services.auth import create_access_token
from app.services.work_time_tracker import WorkTimeTracker


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSession = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class FakeClock:
    """Controllable clock for the tracker and scheduler."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_session_factory] = lambda: TestSession


@pytest.fixture
def session_factory():
    return TestSession


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 10, 0, 0))


@pytest.fixture
def tracker(clock):
    """Tracker bound to the test database and the fake clock."""
    return WorkTimeTracker(session_factory=TestSession, clock=clock)


@pytest_asyncio.fixture
async def client(tracker):
    """Async HTTP test client."""
    app.dependency_overrides[get_work_time_tracker] = lambda: tracker
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_work_time_tracker, None)


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


@pytest.fixture
def make_user(db):
    """Factory that inserts a user. Defaults to an active, KYC-completed user."""
    counter = {"n": 0}

    async def _make_user(**overrides) -> User:
        counter["n"] += 1
        fields = {
            "email": f"user{counter['n']}@example.com",
            "full_name": f"User {counter['n']}",
            "kyc_status": KycStatus.APPROVED.value,
            "verification_status": VerificationStatus.VERIFIED.value,
            "status": AccountStatus.ACTIVE.value,
            "balance": Decimal("100.00"),
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user."""
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers

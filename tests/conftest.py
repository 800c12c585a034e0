import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from typing import AsyncGenerator, Awaitable, Callable, Dict, Optional
import uuid
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.permissions import CallerContext
from app.core.security import create_access_token
from app.domain.identity.service import IdentityService
from app.domain.profiles.repository import load_caller_context
from app.infrastructure.database import Base, enable_sqlite_foreign_keys, get_db, init_db


# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# One shared in-memory connection for the whole test
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)

TestSessionLocal = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test."""
    await init_db(bind=test_engine)

    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database dependency override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[CallerContext]]:
    """Factory registering an identity (and its profile) with a given role."""

    async def _make_user(
        role: Optional[str] = "patient",
        email: Optional[str] = None,
        full_name: Optional[str] = None
    ) -> CallerContext:
        metadata = {}
        if role is not None:
            metadata["role"] = role
        if full_name is not None:
            metadata["full_name"] = full_name

        identity = await IdentityService(db_session).register(
            email=email or f"{role or 'user'}-{uuid.uuid4().hex[:8]}@example.com",
            password=TEST_PASSWORD,
            metadata=metadata
        )
        return await load_caller_context(db_session, identity.id)

    return _make_user


@pytest.fixture(scope="function")
async def patient(make_user) -> CallerContext:
    return await make_user("patient", full_name="Pat Patient")


@pytest.fixture(scope="function")
async def other_patient(make_user) -> CallerContext:
    return await make_user("patient", full_name="Olive Other")


@pytest.fixture(scope="function")
async def surgeon(make_user) -> CallerContext:
    return await make_user("surgeon", full_name="Sam Surgeon")


@pytest.fixture(scope="function")
async def other_surgeon(make_user) -> CallerContext:
    return await make_user("surgeon", full_name="Sid Second")


@pytest.fixture(scope="function")
async def admin(make_user) -> CallerContext:
    return await make_user("admin", full_name="Ada Admin")


@pytest.fixture(scope="function")
def auth_headers() -> Callable[[CallerContext], Dict[str, str]]:
    """Build a bearer header for a registered caller."""

    def _auth_headers(caller: CallerContext) -> Dict[str, str]:
        token = create_access_token(str(caller.user_id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture(scope="function")
def sample_vitals_data() -> dict:
    """Sample vital-sign measurement."""
    return {
        "heart_rate": 72,
        "systolic_bp": 120,
        "diastolic_bp": 80,
        "body_temperature_celsius": 36.8,
        "respiratory_rate": 16,
        "notes": "Resting"
    }


@pytest.fixture(scope="function")
def sample_surgeon_data() -> dict:
    """Sample surgeon directory entry."""
    return {
        "specialty": "Orthopedic Surgery",
        "hospital_affiliation": "General Hospital",
        "years_of_experience": 12,
        "certifications": ["ABOS"],
        "bio": "Joint replacement",
        "consultation_fee": 150.0
    }


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "auth: mark test as authentication related"
    )
    config.addinivalue_line(
        "markers", "rbac: mark test as row-level authorization related"
    )
    config.addinivalue_line(
        "markers", "provisioning: mark test as signup provisioning related"
    )

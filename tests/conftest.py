"""Shared fixtures: in-memory SQLite database, users and an API client."""

import os

# Must be set before gateway_checkin.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from gateway_checkin.config import Settings, get_settings
from gateway_checkin.models import Base, User, UserRole, UserStatus
from gateway_checkin.services.checkin_config import CheckinConfigStore
from gateway_checkin.utils.db import create_session_factory, get_db

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def get_test_settings() -> Settings:
    """Get test-specific settings."""
    return Settings(
        app_env="test",
        app_debug=False,
        log_level="WARNING",
        database_url=TEST_DATABASE_URL,
        checkin_timezone="UTC",
        quota_per_unit=1000.0,
        request_timeout_seconds=5.0,
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and the app under test."""
    session_factory = create_session_factory(test_engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_settings() -> Settings:
    return get_test_settings()


# =============================================================================
# User Fixtures
# =============================================================================


async def _create_user(
    db: AsyncSession,
    username: str,
    role: UserRole = UserRole.COMMON,
    status: UserStatus = UserStatus.ENABLED,
    quota: int = 0,
) -> User:
    user = User(
        username=username,
        display_name=username,
        role=role.value,
        status=status.value,
        quota=quota,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def test_user(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "alice", quota=1000)


@pytest_asyncio.fixture(scope="function")
async def test_admin(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "admin", role=UserRole.ADMIN)


@pytest_asyncio.fixture(scope="function")
async def disabled_user(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "mallory", status=UserStatus.DISABLED)


@pytest.fixture
def user_headers(test_user: User) -> dict[str, str]:
    return {"X-User-Id": str(test_user.id)}


@pytest.fixture
def admin_headers(test_admin: User) -> dict[str, str]:
    return {"X-User-Id": str(test_admin.id)}


# =============================================================================
# Config Helpers
# =============================================================================


def make_config(**overrides) -> dict:
    """Check-in settings payload with the feature switched on."""
    values = {
        "enabled": True,
        "min_quota": 100,
        "max_quota": 100,
        "checkin_code_enabled": False,
        "checkin_code": "",
        "consecutive_reward_enabled": True,
        "consecutive_reward_quota": 50,
        "calendar_enabled": False,
    }
    values.update(overrides)
    return values


@pytest_asyncio.fixture(scope="function")
async def enabled_config(test_db: AsyncSession):
    """Saved config: enabled, 100 base, 50 streak bonus."""
    return await CheckinConfigStore(test_db).update(make_config())


# =============================================================================
# FastAPI App & Client Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_app(test_db: AsyncSession):
    """The real application with database and settings overridden."""
    from gateway_checkin.main import app

    async def override_get_db():
        try:
            yield test_db
            await test_db.commit()
        except Exception:
            await test_db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = get_test_settings

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""Pytest configuration for all tests."""

import os

# Settings are cached on first use, so the test environment has to be in
# place before any shopcore module is imported.
os.environ.setdefault("SHOPCORE_ENVIRONMENT", "testing")
os.environ.setdefault("SHOPCORE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SHOPCORE_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("SHOPCORE_HASHER_TIME_COST", "1")
os.environ.setdefault("SHOPCORE_HASHER_MEMORY_COST", "1024")
os.environ.setdefault("SHOPCORE_HASHER_PARALLELISM", "1")
os.environ.setdefault("SHOPCORE_LOG_FORMAT", "console")

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shopcore.domain.entities import RoleTier
from shopcore.domain.services import LoginThrottle
from shopcore.infrastructure.auth import hash_password, token_codec
from shopcore.infrastructure.persistence.database import Base, seed_default_roles
from shopcore.infrastructure.persistence.models import RoleModel, UserModel

DEFAULT_PASSWORD = "SecureP@ss1"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database with the four role tiers seeded.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        await seed_default_roles(session)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, clock: FakeClock) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency.

    The login throttle runs on the ``clock`` fixture so tests can step past
    the cooldown without sleeping.
    """
    from shopcore.infrastructure.api.app import app
    from shopcore.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    original_throttle = app.state.login_throttle
    app.state.login_throttle = LoginThrottle(cooldown_seconds=5.0, clock=clock)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
    app.state.login_throttle = original_throttle


async def _role_id(session: AsyncSession, tier: RoleTier) -> int:
    result = await session.execute(select(RoleModel.id).where(RoleModel.name == tier.value))
    return result.scalar_one()


async def make_user(
    session: AsyncSession,
    tier: RoleTier = RoleTier.USER,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    name: str = "Test User",
) -> UserModel:
    """Insert a user with the given role tier and commit."""
    user = UserModel(
        id=str(uuid.uuid4()),
        name=name,
        email=email or f"{uuid.uuid4().hex[:10]}@example.com",
        password_hash=hash_password(password),
        role_id=await _role_id(session, tier),
        token_version=1,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def token_for(user: UserModel) -> str:
    return token_codec.sign(user.id, user.email, user.token_version)


@pytest_asyncio.fixture
async def regular_user(db_session: AsyncSession) -> UserModel:
    """A user with the USER tier."""
    return await make_user(db_session, RoleTier.USER, email="user@example.com")


@pytest_asyncio.fixture
async def premium_user(db_session: AsyncSession) -> UserModel:
    """A user with the PREMIUM tier."""
    return await make_user(db_session, RoleTier.PREMIUM, email="premium@example.com")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> UserModel:
    """A user with the ADMIN tier."""
    return await make_user(db_session, RoleTier.ADMIN, email="admin@example.com")


@pytest_asyncio.fixture
async def banned_user(db_session: AsyncSession) -> UserModel:
    """A user with the BAN tier."""
    return await make_user(db_session, RoleTier.BAN, email="banned@example.com")


@pytest.fixture
def regular_user_token(regular_user: UserModel) -> str:
    return token_for(regular_user)


@pytest.fixture
def premium_user_token(premium_user: UserModel) -> str:
    return token_for(premium_user)


@pytest.fixture
def admin_user_token(admin_user: UserModel) -> str:
    return token_for(admin_user)


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """Create users on demand: ``await user_factory(RoleTier.PREMIUM)``."""

    async def _create(tier: RoleTier = RoleTier.USER, **kwargs) -> UserModel:
        return await make_user(db_session, tier, **kwargs)

    return _create


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user."""

    def _headers(user: UserModel) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user)}"}

    return _headers

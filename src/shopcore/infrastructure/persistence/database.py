"""Credential store engine and sessions.

ShopCore keeps users, roles, API keys and products in one SQL database
reached through SQLAlchemy's async engine. SQLite (aiosqlite) is the
default; any async driver URL works. Request handlers get one session per
request from :func:`get_db_session` and commit explicitly.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from shopcore.core.config import Settings, get_settings
from shopcore.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every ShopCore table."""


class Database:
    """Owns the async engine and hands out sessions."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        connect_args = {"check_same_thread": False} if self.is_sqlite else {}
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, connect_args=connect_args)
        self.sessions = async_sessionmaker(self.engine, expire_on_commit=False, autoflush=False)
        logger.info(
            "Database engine created",
            database_url=self.engine.url.render_as_string(hide_password=True),
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        settings = settings or get_settings()
        return cls(settings.database_url, echo=settings.db_echo)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def ensure_sqlite_directory(self) -> None:
        """Create the parent directory of a file-backed SQLite database."""
        if not self.is_sqlite or ":memory:" in self.url:
            return
        Path(self.url.split(":///", 1)[-1]).parent.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that is rolled back if the block raises."""
        async with self.sessions() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create every table registered on :class:`Base`."""
        # Registers the tables on Base.metadata
        from shopcore.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created")

    async def ping(self) -> bool:
        """Run ``SELECT 1`` and report whether it succeeded."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Database ping failed", error=str(e))
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


_database: Database | None = None


def get_database() -> Database:
    """Return the process-wide database, creating it on first use."""
    global _database
    if _database is None:
        _database = Database.from_settings()
    return _database


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""
    async with get_database().session() as session:
        yield session


async def seed_default_roles(session: AsyncSession) -> None:
    """Insert whichever of the ADMIN, PREMIUM, USER and BAN tiers is missing.

    Existing roles are left untouched, so flags edited by an operator
    survive a restart. Commits before returning.
    """
    from shopcore.domain.entities import DEFAULT_ROLE_GRANTS
    from shopcore.infrastructure.persistence.models import RoleModel

    existing = set((await session.execute(select(RoleModel.name))).scalars())
    for tier, capabilities in DEFAULT_ROLE_GRANTS.items():
        if tier.value in existing:
            continue
        session.add(RoleModel.from_capabilities(tier.value, capabilities))
        logger.info("Seeded default role", role_name=tier.value)

    await session.commit()


async def init_database() -> None:
    """Check connectivity at startup; in development also build the schema.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    settings = get_settings()
    database = get_database()
    database.ensure_sqlite_directory()

    if not await database.ping():
        raise RuntimeError("Failed to connect to database")

    if not settings.is_development:
        logger.info("Schema left to the operator", environment=settings.environment)
        return

    await database.create_schema()
    async with database.session() as session:
        await seed_default_roles(session)


async def close_database() -> None:
    """Dispose the process-wide engine, if one was created."""
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None

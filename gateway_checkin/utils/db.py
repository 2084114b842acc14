"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gateway_checkin.config import Settings, get_settings

settings = get_settings()


def build_engine_kwargs(config: Settings) -> dict[str, Any]:
    """Engine options for the configured backend.

    SQLite ignores pool sizing; PostgreSQL (asyncpg) additionally gets a
    per-statement timeout so that no store call can block indefinitely.
    """
    kwargs: dict[str, Any] = {
        "echo": config.app_debug and config.log_level.upper() == "DEBUG",
        "future": True,
    }
    if config.database_url.startswith("sqlite"):
        return kwargs

    kwargs.update(
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=config.db_pool_timeout,
        pool_recycle=config.db_pool_recycle,
        pool_pre_ping=True,
    )
    if config.database_url.startswith("postgresql+asyncpg"):
        kwargs["connect_args"] = {"command_timeout": config.db_command_timeout}
    return kwargs


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by the app and by tests."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine = create_async_engine(settings.database_url, **build_engine_kwargs(settings))

async_session_factory = create_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session.

    Usage:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(create_tables: bool = False) -> None:
    """Verify connectivity; optionally create missing tables (dev/SQLite)."""
    from gateway_checkin.models import Base

    async with engine.begin() as conn:
        if create_tables:
            await conn.run_sync(Base.metadata.create_all)
        else:
            await conn.run_sync(lambda _: None)


async def close_db() -> None:
    """Close database connection pool."""
    await engine.dispose()

"""
Async database engine and session factory.

Uses SQLAlchemy 2.x async engine with the asyncpg driver for PostgreSQL or
aiosqlite for local SQLite files. Provides module-level engine and session
factory singletons, table creation for startup, and an async generator for
FastAPI dependency injection.

CHANGELOG:
- 2026-10-17: Add create_tables() and dispose_engine() for the app lifespan
- 2026-10-17: Initial creation

TODO:
- None
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from solar_monitor.config import Settings, get_settings
from solar_monitor.db.models import Base

# Module-level singletons, initialized lazily via init_engine().
async_engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(settings: Settings | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine from configuration.

    Args:
        settings: Optional settings. Defaults to the process-wide settings.

    Returns:
        AsyncEngine: Configured async engine.
    """
    if settings is None:
        settings = get_settings()
    return create_async_engine(settings.database_url, echo=settings.sql_echo)


def create_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory.

    Args:
        engine: Optional async engine. If not provided, creates one from config.

    Returns:
        async_sessionmaker: Factory for creating AsyncSession instances.
    """
    if engine is None:
        engine = create_engine()
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def init_engine() -> None:
    """Initialize the module-level async engine and session factory.

    Call this at application startup (e.g., in a FastAPI lifespan event).
    Safe to call multiple times; subsequent calls are no-ops.
    """
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is None:
        async_engine = create_engine()
        async_session_factory = create_session_factory(async_engine)


async def dispose_engine() -> None:
    """Dispose the module-level engine and reset the singletons."""
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is not None:
        await async_engine.dispose()
    async_engine = None
    async_session_factory = None


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet.

    Args:
        engine: Engine to use. Defaults to the module-level engine.
    """
    if engine is None:
        init_engine()
        engine = async_engine
    assert engine is not None, "Engine not initialized"
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for FastAPI dependency injection.

    Initializes the engine on first call if not already done.
    The session is automatically closed after the request completes.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    init_engine()
    assert async_session_factory is not None, "Session factory not initialized"
    async with async_session_factory() as session:
        yield session

"""
Shared test fixtures for the solar monitor tests.

Every test runs against its own SQLite database file under tmp_path through
aiosqlite, so service and API tests exercise the real SQL. Redis is left
unconfigured (cache disabled) unless a test sets REDIS_URL itself.

CHANGELOG:
- 2026-10-17: Initial creation
"""

from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from solar_monitor.config import get_settings
from solar_monitor.db.session import create_session_factory, create_tables


class FakeClock:
    """Callable clock returning a fixed, manually advanced UTC time."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 10, 17, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_panel(name: str = "P1", dirt_level: int | None = 5, **overrides: object) -> dict:
    """Build a single panel dict as a dashboard would send it."""
    panel = {
        "name": name,
        "power": 10.0,
        "efficiency": 90,
        "status": "online",
        "temp": 40,
        "dirtLevel": dirt_level,
        "dustAccumulation": "low",
    }
    panel.update(overrides)
    return panel


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Point the app at a per-test SQLite file and disable Redis.

    Also changes into tmp_path so no .env file is picked up by the settings.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("MAX_PANELS_PER_REQUEST", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture()
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine on a fresh SQLite file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'services.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture()
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """Create a FastAPI TestClient for integration testing.

    Uses a context manager so the lifespan creates the tables in the
    per-test database and disposes the engine afterwards.

    Yields:
        TestClient: Configured test client for the FastAPI app.
    """
    from solar_monitor.api.main import app

    with TestClient(app) as test_client:
        yield test_client

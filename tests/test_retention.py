"""
Tests for RetentionService and retention window parsing.

CHANGELOG:
- 2026-10-17: Initial creation
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from solar_monitor.errors import StoreError, ValidationError
from solar_monitor.services.panel_store import PanelStore, ReadingIn
from solar_monitor.services.retention import (
    MAX_RETENTION_DAYS,
    RetentionService,
    parse_retention_days,
)
from tests.conftest import FakeClock, make_panel

# ---------------------------------------------------------------------------
# parse_retention_days
# ---------------------------------------------------------------------------


class TestParseRetentionDays:
    """Only bounded non-negative integers are accepted."""

    @pytest.mark.parametrize(("raw", "expected"), [(0, 0), (30, 30), ("7", 7), ("0", 0)])
    def test_valid(self, raw: object, expected: int) -> None:
        assert parse_retention_days(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "-1",
            -1,
            "abc",
            "1.5",
            1.5,
            "",
            None,
            True,
            "7 days'; DROP TABLE solar_panels; --",
            "1e3",
        ],
    )
    def test_invalid(self, raw: object) -> None:
        with pytest.raises(ValidationError):
            parse_retention_days(raw)

    def test_upper_bound(self) -> None:
        assert parse_retention_days(MAX_RETENTION_DAYS) == MAX_RETENTION_DAYS
        with pytest.raises(ValidationError):
            parse_retention_days(MAX_RETENTION_DAYS + 1)


# ---------------------------------------------------------------------------
# cleanup
# ---------------------------------------------------------------------------


async def _seed(factory: async_sessionmaker[AsyncSession], clock: FakeClock, *names: str) -> None:
    async with factory() as session:
        await PanelStore(session, clock).append_many(
            [ReadingIn.model_validate(make_panel(n)) for n in names]
        )
        await session.commit()


class TestCleanup:
    """cleanup validates, purges and commits."""

    @pytest.mark.asyncio
    async def test_deletes_and_commits(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: FakeClock,
    ) -> None:
        await _seed(session_factory, clock, "P1", "P2")
        clock.advance(days=40)
        await _seed(session_factory, clock, "P3")

        async with session_factory() as session:
            deleted = await RetentionService(session, clock).cleanup("30")
        assert deleted == 2

        async with session_factory() as session:
            remaining = await PanelStore(session).latest_per_panel(100)
        assert [r.name for r in remaining] == ["P3"]

    @pytest.mark.asyncio
    async def test_invalid_days_never_reaches_store(
        self, db_session: AsyncSession, clock: FakeClock
    ) -> None:
        service = RetentionService(db_session, clock)
        service.panels.purge_older_than = AsyncMock()
        with pytest.raises(ValidationError):
            await service.cleanup("5; DELETE FROM daily_stats")
        service.panels.purge_older_than.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_rolls_back(
        self, db_session: AsyncSession, clock: FakeClock
    ) -> None:
        service = RetentionService(db_session, clock)
        service.panels.purge_older_than = AsyncMock(side_effect=StoreError("boom"))
        db_session.rollback = AsyncMock()
        with pytest.raises(StoreError):
            await service.cleanup(1)
        db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_invalidated_only_when_rows_deleted(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: FakeClock,
    ) -> None:
        await _seed(session_factory, clock, "P1")
        clock.advance(days=2)

        with patch(
            "solar_monitor.services.retention.invalidate_snapshot_cache",
            new_callable=AsyncMock,
        ) as mock_invalidate:
            async with session_factory() as session:
                assert await RetentionService(session, clock).cleanup(5) == 0
            mock_invalidate.assert_not_awaited()

            async with session_factory() as session:
                assert await RetentionService(session, clock).cleanup(1) == 1
            mock_invalidate.assert_awaited_once()

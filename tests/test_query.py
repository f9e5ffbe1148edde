"""
Tests for QueryService and paging parameter coercion.

CHANGELOG:
- 2026-10-17: Initial creation
"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.errors import StoreError
from solar_monitor.services.ingestion import IngestionService
from solar_monitor.services.query import QueryService, coerce_limit
from tests.conftest import FakeClock, make_panel


class TestCoerceLimit:
    """Missing, non-integer, and non-positive values fall back to the default."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 100),
            ("25", 25),
            (25, 25),
            ("0", 100),
            ("-3", 100),
            ("abc", 100),
            ("2.5", 100),
            (True, 100),
            ("10000", 10_000),
            ("10001", 100),
            ("99999999999999999999", 100),
        ],
    )
    def test_coerce(self, raw: object, expected: int) -> None:
        assert coerce_limit(raw, 100) == expected


class TestQueryService:
    """QueryService delegates to the stores with defaults applied."""

    @pytest.mark.asyncio
    async def test_snapshot_history_and_stats(
        self, db_session: AsyncSession, clock: FakeClock
    ) -> None:
        ingest = IngestionService(db_session, clock)
        for i in range(12):
            await ingest.ingest(
                {"panels": [make_panel("P1", power=float(i)), make_panel("P2")]}
            )
            clock.advance(minutes=1)

        query = QueryService(db_session)

        snapshot = await query.get_latest_snapshot()
        assert [r.name for r in snapshot] == ["P1", "P2"]
        assert snapshot[0].power == 11.0

        history = await query.get_panel_history("P1")
        assert len(history) == 10
        assert history[0].power == 11.0

        assert len(await query.get_panel_history("P1", "3")) == 3
        assert len(await query.get_latest_snapshot("1")) == 1

        stats = await query.get_daily_stats()
        assert len(stats) == 1

    @pytest.mark.asyncio
    async def test_store_failure_surfaces_as_store_error(
        self, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def _boom(*args: object, **kwargs: object) -> None:
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(db_session, "scalars", _boom)
        with pytest.raises(StoreError, match="connection refused"):
            await QueryService(db_session).get_daily_stats(7)

"""
Daily rollup service: one aggregate row per UTC calendar date.

upsert() issues a single INSERT ... ON CONFLICT (date) DO UPDATE ... RETURNING
statement, so concurrent upserts for the same date never produce a mixed row:
the last transaction to commit wins in full. Values are replaced, never
accumulated.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import datetime
import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import Insert as PgInsert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import Insert as SqliteInsert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.clock import Clock, utc_now
from solar_monitor.db.models import DailyStat
from solar_monitor.errors import store_errors

logger = logging.getLogger(__name__)

DEFAULT_STATS_DAYS = 7

# Fields replaced on conflict. total_energy is left untouched.
_UPSERT_FIELDS = (
    "total_power",
    "avg_efficiency",
    "clean_panels",
    "dirty_panels",
    "updated_at",
)


class DailyRollup:
    """Date-keyed aggregate persistence on top of an AsyncSession."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        self.db = db
        self.clock = clock

    def _insert(self) -> Callable[..., PgInsert | SqliteInsert]:
        """Return the dialect-specific insert() supporting ON CONFLICT."""
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite_insert
        return pg_insert

    async def upsert(
        self,
        date: datetime.date,
        total_power: float | None,
        avg_efficiency: float | None,
        clean_count: int,
        dirty_count: int,
    ) -> DailyStat:
        """Insert or fully replace the aggregate row for ``date``.

        Args:
            date: Calendar date key.
            total_power: Caller-supplied total power, stored verbatim.
            avg_efficiency: Caller-supplied average efficiency, stored verbatim.
            clean_count: Number of clean panels in the batch.
            dirty_count: Number of dirty panels in the batch.

        Returns:
            DailyStat: The row as it stands after the upsert.

        Raises:
            StoreError: If the statement fails.
        """
        insert = self._insert()
        stmt = insert(DailyStat).values(
            date=date,
            total_power=total_power,
            avg_efficiency=avg_efficiency,
            clean_panels=clean_count,
            dirty_panels=dirty_count,
            updated_at=self.clock(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["date"],
            set_={field: stmt.excluded[field] for field in _UPSERT_FIELDS},
        ).returning(DailyStat)
        orm_stmt = (
            select(DailyStat)
            .from_statement(stmt)
            .execution_options(populate_existing=True)
        )
        with store_errors("Daily stats upsert"):
            result = await self.db.scalars(orm_stmt)
            stat = result.one()
        logger.debug(
            "Upserted daily stats for %s: clean=%d dirty=%d",
            date.isoformat(),
            clean_count,
            dirty_count,
        )
        return stat

    async def list_recent(self, days: int = DEFAULT_STATS_DAYS) -> list[DailyStat]:
        """Return up to ``days`` aggregates, newest date first."""
        stmt = select(DailyStat).order_by(DailyStat.date.desc()).limit(days)
        with store_errors("Daily stats query"):
            result = await self.db.scalars(stmt)
            return list(result.all())

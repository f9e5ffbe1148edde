"""
Persistence of raw panel readings.

PanelStore appends readings, answers the latest-per-panel and per-panel
history queries, and purges readings by age. Methods flush but never commit:
the calling service owns the transaction.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import logging
from collections.abc import Sequence
from datetime import timedelta

from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.clock import Clock, utc_now
from solar_monitor.db.models import PanelReading
from solar_monitor.errors import store_errors

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 10


class ReadingIn(BaseModel):
    """Single panel reading as submitted by a client.

    Accepts the camelCase keys sent by dashboards (dirtLevel,
    dustAccumulation) as well as the snake_case column names. Fields are
    strict: booleans and numeric strings are rejected, ints are accepted
    for power.
    """

    name: str = Field(strict=True, min_length=1, max_length=50)
    power: float | None = Field(default=None, strict=True)
    efficiency: int | None = Field(default=None, strict=True)
    status: str | None = Field(default=None, strict=True, max_length=20)
    temp: int | None = Field(
        default=None,
        strict=True,
        validation_alias=AliasChoices("temp", "temperature"),
    )
    dirt_level: int | None = Field(
        default=None,
        strict=True,
        validation_alias=AliasChoices("dirtLevel", "dirt_level"),
    )
    dust_accumulation: str | None = Field(
        default=None,
        strict=True,
        max_length=20,
        validation_alias=AliasChoices("dustAccumulation", "dust_accumulation"),
    )


class PanelStore:
    """Raw reading persistence on top of an AsyncSession."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        self.db = db
        self.clock = clock

    async def append_many(self, readings: Sequence[ReadingIn]) -> list[PanelReading]:
        """Persist readings and return them in input order.

        Every reading in the call gets the same server-side recorded_at; ids
        are assigned by the database on flush.

        Args:
            readings: Validated readings to persist.

        Returns:
            list[PanelReading]: The persisted rows with id and recorded_at set.

        Raises:
            StoreError: If the database rejects the insert.
        """
        recorded_at = self.clock()
        rows = [
            PanelReading(**reading.model_dump(), recorded_at=recorded_at)
            for reading in readings
        ]
        if not rows:
            return rows
        with store_errors("Insert readings"):
            self.db.add_all(rows)
            await self.db.flush()
        return rows

    async def latest_per_panel(
        self, limit: int = DEFAULT_SNAPSHOT_LIMIT
    ) -> list[PanelReading]:
        """Return the newest reading of each distinct panel, ordered by name.

        Newest is the highest recorded_at, ties broken by the highest id.
        """
        ranked = select(
            PanelReading.id,
            func.row_number()
            .over(
                partition_by=PanelReading.name,
                order_by=(PanelReading.recorded_at.desc(), PanelReading.id.desc()),
            )
            .label("rn"),
        ).subquery()
        stmt = (
            select(PanelReading)
            .join(ranked, PanelReading.id == ranked.c.id)
            .where(ranked.c.rn == 1)
            .order_by(PanelReading.name.asc())
            .limit(limit)
        )
        with store_errors("Latest snapshot query"):
            result = await self.db.scalars(stmt)
            return list(result.all())

    async def history_for(
        self, name: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> list[PanelReading]:
        """Return readings for one panel, newest first."""
        stmt = (
            select(PanelReading)
            .where(PanelReading.name == name)
            .order_by(PanelReading.recorded_at.desc(), PanelReading.id.desc())
            .limit(limit)
        )
        with store_errors("Panel history query"):
            result = await self.db.scalars(stmt)
            return list(result.all())

    async def purge_older_than(self, days: int) -> int:
        """Delete readings recorded strictly before now minus ``days`` days.

        The cutoff is computed here and bound as a parameter.

        Args:
            days: Non-negative age threshold in days.

        Returns:
            int: Number of rows deleted.
        """
        cutoff = self.clock() - timedelta(days=days)
        stmt = (
            delete(PanelReading)
            .where(PanelReading.recorded_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        with store_errors("Purge readings"):
            result = await self.db.execute(stmt)
        deleted = result.rowcount
        logger.debug("Purged %d readings recorded before %s", deleted, cutoff.isoformat())
        return deleted

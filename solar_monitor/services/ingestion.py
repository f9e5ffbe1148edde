"""
Ingestion service for batches of panel readings.

Validates the decoded request body, persists the readings, and upserts the
rollup row for the current UTC date. Both writes run in one transaction:
either every reading and the aggregate are committed, or nothing is.

The aggregate always reflects the latest batch of the day. totalPower and
avgEfficiency are stored as the client sent them; only the clean/dirty
counts are derived here, from the submitted batch.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.cache.redis_client import invalidate_snapshot_cache
from solar_monitor.clock import Clock, utc_now
from solar_monitor.db.models import DailyStat, PanelReading
from solar_monitor.errors import StoreError, ValidationError, store_errors
from solar_monitor.services.panel_store import PanelStore, ReadingIn
from solar_monitor.services.rollup import DailyRollup

logger = logging.getLogger(__name__)

CLEAN_THRESHOLD = 10
DIRTY_THRESHOLD = 30

INVALID_FORMAT_MESSAGE = "Invalid data format. Expected panels array."


class IngestBatch(BaseModel):
    """Validated ingest request body."""

    panels: list[ReadingIn]
    total_power: float | None = Field(
        default=None,
        strict=True,
        validation_alias=AliasChoices("totalPower", "total_power"),
    )
    avg_efficiency: float | None = Field(
        default=None,
        strict=True,
        validation_alias=AliasChoices("avgEfficiency", "avg_efficiency"),
    )


@dataclass(frozen=True)
class IngestResult:
    """Rows written by one ingest call."""

    inserted: list[PanelReading]
    aggregate: DailyStat


def count_clean_dirty(readings: list[ReadingIn]) -> tuple[int, int]:
    """Count clean (dirt_level < 10) and dirty (dirt_level >= 30) readings.

    Readings without a dirt level, or between the thresholds, count toward
    neither.
    """
    levels = [r.dirt_level for r in readings if r.dirt_level is not None]
    clean = sum(1 for level in levels if level < CLEAN_THRESHOLD)
    dirty = sum(1 for level in levels if level >= DIRTY_THRESHOLD)
    return clean, dirty


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"])
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)


def parse_batch(payload: Any, max_panels: int | None = None) -> IngestBatch:
    """Validate a decoded JSON body into an IngestBatch.

    Args:
        payload: The decoded request body.
        max_panels: Optional upper bound on the number of readings.

    Returns:
        IngestBatch: The validated batch.

    Raises:
        ValidationError: If the body is not an object, panels is missing or
            not a list, a reading is malformed, or the batch is too large.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("panels"), list):
        raise ValidationError(INVALID_FORMAT_MESSAGE)

    if max_panels is not None and len(payload["panels"]) > max_panels:
        raise ValidationError(
            f"Batch size {len(payload['panels'])} exceeds limit of {max_panels}. "
            "Split into smaller batches."
        )

    try:
        return IngestBatch.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid panel data: {_format_errors(exc)}") from exc


class IngestionService:
    """Orchestrates validation, reading persistence and the daily rollup."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utc_now,
        max_panels: int | None = None,
    ) -> None:
        self.db = db
        self.clock = clock
        self.max_panels = max_panels
        self.panels = PanelStore(db, clock)
        self.rollup = DailyRollup(db, clock)

    async def ingest(self, payload: Any) -> IngestResult:
        """Validate and persist a batch, then upsert today's aggregate.

        Args:
            payload: Decoded request body ``{panels, totalPower, avgEfficiency}``.

        Returns:
            IngestResult: Inserted readings (input order) and the aggregate.

        Raises:
            ValidationError: If the payload is malformed. Nothing is written.
            StoreError: If any write fails. The transaction is rolled back.
        """
        batch = parse_batch(payload, self.max_panels)
        today = self.clock().date()
        clean_count, dirty_count = count_clean_dirty(batch.panels)

        try:
            inserted = await self.panels.append_many(batch.panels)
            aggregate = await self.rollup.upsert(
                today,
                batch.total_power,
                batch.avg_efficiency,
                clean_count,
                dirty_count,
            )
            with store_errors("Ingest commit"):
                await self.db.commit()
        except StoreError:
            await self.db.rollback()
            raise

        logger.info(
            "Ingested %d readings for %s (clean=%d, dirty=%d)",
            len(inserted),
            today.isoformat(),
            clean_count,
            dirty_count,
        )
        await invalidate_snapshot_cache()
        return IngestResult(inserted=inserted, aggregate=aggregate)

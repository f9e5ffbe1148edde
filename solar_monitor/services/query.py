"""
Read-only query service over readings and daily aggregates.

CHANGELOG:
- 2026-10-17: Initial creation
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.db.models import DailyStat, PanelReading
from solar_monitor.services.panel_store import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_SNAPSHOT_LIMIT,
    PanelStore,
)
from solar_monitor.services.rollup import DEFAULT_STATS_DAYS, DailyRollup

# Upper bound for limit/days query parameters; larger values fall back to
# the default like any other invalid input.
MAX_PAGE_LIMIT = 10_000


def coerce_limit(raw: Any, default: int) -> int:
    """Coerce a paging parameter to a positive int, else return ``default``.

    Accepts ints and integer strings. Missing, non-integer, non-positive and
    oversized (above MAX_PAGE_LIMIT) values all fall back to the default.
    """
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if 0 < value <= MAX_PAGE_LIMIT else default


class QueryService:
    """Latest snapshot, panel history, and daily stats lookups."""

    def __init__(self, db: AsyncSession) -> None:
        self.panels = PanelStore(db)
        self.rollup = DailyRollup(db)

    async def get_latest_snapshot(self, limit: Any = None) -> list[PanelReading]:
        return await self.panels.latest_per_panel(
            coerce_limit(limit, DEFAULT_SNAPSHOT_LIMIT)
        )

    async def get_panel_history(self, name: str, limit: Any = None) -> list[PanelReading]:
        return await self.panels.history_for(
            name, coerce_limit(limit, DEFAULT_HISTORY_LIMIT)
        )

    async def get_daily_stats(self, days: Any = None) -> list[DailyStat]:
        return await self.rollup.list_recent(coerce_limit(days, DEFAULT_STATS_DAYS))

"""
Retention service: purge raw readings older than a caller-supplied age.

The age arrives as a URL path segment. It is parsed into a bounded
non-negative int before it reaches the store, and the store binds the
resulting cutoff as a query parameter.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import logging
import re
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.cache.redis_client import invalidate_snapshot_cache
from solar_monitor.clock import Clock, utc_now
from solar_monitor.errors import StoreError, ValidationError, store_errors
from solar_monitor.services.panel_store import PanelStore

logger = logging.getLogger(__name__)

MAX_RETENTION_DAYS = 36500

_DIGITS = re.compile(r"[0-9]+")


def parse_retention_days(raw: Any) -> int:
    """Parse a retention window into an int in [0, MAX_RETENTION_DAYS].

    Args:
        raw: An int or a string of ASCII digits.

    Returns:
        int: The validated number of days.

    Raises:
        ValidationError: For anything else, including negative values.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        days = raw
    elif isinstance(raw, str) and _DIGITS.fullmatch(raw.strip()):
        days = int(raw.strip())
    else:
        raise ValidationError(
            f"Invalid retention window {raw!r}. Expected a non-negative integer."
        )
    if days < 0 or days > MAX_RETENTION_DAYS:
        raise ValidationError(
            f"Retention window must be between 0 and {MAX_RETENTION_DAYS} days."
        )
    return days


class RetentionService:
    """Deletes readings past the retention window."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        self.db = db
        self.panels = PanelStore(db, clock)

    async def cleanup(self, days: Any) -> int:
        """Delete readings older than ``days`` days and commit.

        Returns:
            int: Number of readings deleted.

        Raises:
            ValidationError: If ``days`` is not a valid retention window.
            StoreError: If the delete fails. The transaction is rolled back.
        """
        window = parse_retention_days(days)
        try:
            deleted = await self.panels.purge_older_than(window)
            with store_errors("Cleanup commit"):
                await self.db.commit()
        except StoreError:
            await self.db.rollback()
            raise

        logger.info("Deleted %d readings older than %d days", deleted, window)
        if deleted:
            await invalidate_snapshot_cache()
        return deleted

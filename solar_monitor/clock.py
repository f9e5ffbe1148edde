"""
Wall-clock source for server-assigned timestamps.

Services take a Clock at construction so tests can pin "now". Every clock
returns timezone-aware UTC datetimes; the rollup date is derived from it.
"""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)

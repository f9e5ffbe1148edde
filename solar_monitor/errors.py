"""
Domain error types and the store error translation helper.

ValidationError covers malformed caller input and maps to HTTP 400.
StoreError covers anything the database layer raises and maps to HTTP 500.

CHANGELOG:
- 2026-10-17: Initial creation
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class SolarMonitorError(Exception):
    """Base class for errors raised by the solar monitor services."""


class ValidationError(SolarMonitorError):
    """Caller input was malformed; nothing was written."""


class StoreError(SolarMonitorError):
    """The database was unreachable or rejected a statement."""


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy errors raised inside the block into StoreError.

    Args:
        action: Short description of the operation, used in the message.

    Raises:
        StoreError: Wrapping the original SQLAlchemyError.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("%s failed: %s", action, exc, exc_info=True)
        raise StoreError(f"{action} failed: {exc}") from exc

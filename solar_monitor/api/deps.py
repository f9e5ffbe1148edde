"""
FastAPI dependency injection providers.

Provides database sessions and the per-request service objects built on
them, for use with FastAPI's Depends() mechanism.

CHANGELOG:
- 2026-10-17: Add service providers
- 2026-10-17: Initial creation
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.config import get_settings
from solar_monitor.db.session import get_async_session
from solar_monitor.services.ingestion import IngestionService
from solar_monitor.services.query import QueryService
from solar_monitor.services.retention import RetentionService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async for session in get_async_session():
        yield session


# Type alias for injecting an async DB session via FastAPI Depends().
DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_ingestion_service(db: DbSession) -> IngestionService:
    return IngestionService(db, max_panels=get_settings().max_panels_per_request)


def get_query_service(db: DbSession) -> QueryService:
    return QueryService(db)


def get_retention_service(db: DbSession) -> RetentionService:
    return RetentionService(db)

"""
/api/solar-data endpoints: snapshot, ingest, panel history and cleanup.

GET /api/solar-data serves the latest reading of each panel, cached in Redis
when configured. POST ingests a batch and upserts today's aggregate. The
cleanup route purges readings older than a number of days.

Domain errors raised by the services are turned into the JSON error envelope
by the exception handlers registered in solar_monitor.api.main.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError as PydanticValidationError

from solar_monitor.api.deps import (
    get_ingestion_service,
    get_query_service,
    get_retention_service,
)
from solar_monitor.api.schemas import (
    CleanupResponse,
    ErrorResponse,
    HistoryResponse,
    IngestResponse,
    ReadingOut,
    SnapshotResponse,
)
from solar_monitor.cache.redis_client import (
    cache_snapshot,
    get_cached_snapshot,
    get_snapshot_generation,
)
from solar_monitor.clock import utc_now
from solar_monitor.errors import ValidationError
from solar_monitor.services.ingestion import INVALID_FORMAT_MESSAGE, IngestionService
from solar_monitor.services.panel_store import DEFAULT_SNAPSHOT_LIMIT
from solar_monitor.services.query import QueryService, coerce_limit
from solar_monitor.services.retention import RetentionService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/solar-data",
    tags=["solar-data"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


def _cached_readings(cached: list[dict] | None) -> list[ReadingOut] | None:
    """Validate a cached payload, treating a malformed one as a miss."""
    if cached is None:
        return None
    try:
        return [ReadingOut.model_validate(item) for item in cached]
    except PydanticValidationError:
        logger.warning("Discarding malformed cached snapshot", exc_info=True)
        return None


@router.get("", response_model=SnapshotResponse)
async def get_latest_snapshot(
    service: Annotated[QueryService, Depends(get_query_service)],
    limit: Annotated[str | None, Query()] = None,
) -> SnapshotResponse:
    """Return the most recent reading of each panel.

    Args:
        service: Query service bound to the request session.
        limit: Max number of panels (default 100).

    Returns:
        SnapshotResponse: Count, readings ordered by panel name, and the
            response timestamp.
    """
    effective_limit = coerce_limit(limit, DEFAULT_SNAPSHOT_LIMIT)
    generation = await get_snapshot_generation()

    data = _cached_readings(await get_cached_snapshot(effective_limit, generation))
    if data is not None:
        logger.debug("Snapshot cache hit (limit=%d)", effective_limit)
    else:
        rows = await service.get_latest_snapshot(effective_limit)
        data = [ReadingOut.model_validate(row) for row in rows]
        await cache_snapshot(
            effective_limit, generation, [item.model_dump(mode="json") for item in data]
        )

    return SnapshotResponse(count=len(data), data=data, timestamp=utc_now())


@router.post("", response_model=IngestResponse)
async def save_solar_data(
    request: Request,
    service: Annotated[IngestionService, Depends(get_ingestion_service)],
) -> IngestResponse:
    """Ingest a batch of panel readings and refresh today's aggregate.

    The body is decoded by hand so that a missing or non-list ``panels``
    produces the 400 envelope rather than FastAPI's 422.

    Raises:
        ValidationError: 400 if the body is not valid JSON or not a batch.
        StoreError: 500 if persistence fails.
    """
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        raise ValidationError(INVALID_FORMAT_MESSAGE) from None

    result = await service.ingest(payload)

    return IngestResponse(
        message=f"Successfully saved data for {len(result.inserted)} panels",
        data=[ReadingOut.model_validate(row) for row in result.inserted],
        timestamp=utc_now(),
    )


@router.get("/{panel_name}", response_model=HistoryResponse)
async def get_panel_history(
    panel_name: str,
    service: Annotated[QueryService, Depends(get_query_service)],
    limit: Annotated[str | None, Query()] = None,
) -> HistoryResponse:
    """Return readings for one panel, newest first (default 10)."""
    rows = await service.get_panel_history(panel_name, limit)
    return HistoryResponse(
        panel_name=panel_name,
        count=len(rows),
        data=[ReadingOut.model_validate(row) for row in rows],
    )


@router.delete("/cleanup/{days}", response_model=CleanupResponse)
async def cleanup_old_records(
    days: str,
    service: Annotated[RetentionService, Depends(get_retention_service)],
) -> CleanupResponse:
    """Delete readings older than ``days`` days.

    Raises:
        ValidationError: 400 if ``days`` is not a non-negative integer.
    """
    deleted = await service.cleanup(days)
    return CleanupResponse(
        message=f"Deleted {deleted} records older than {int(days)} days"
    )

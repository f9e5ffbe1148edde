"""
GET /api/stats endpoint for recent daily aggregates.

CHANGELOG:
- 2026-10-17: Initial creation
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from solar_monitor.api.deps import get_query_service
from solar_monitor.api.schemas import DailyStatOut, ErrorResponse, StatsResponse
from solar_monitor.services.query import QueryService, coerce_limit
from solar_monitor.services.rollup import DEFAULT_STATS_DAYS

router = APIRouter(
    prefix="/api",
    tags=["stats"],
    responses={500: {"model": ErrorResponse}},
)


@router.get("/stats", response_model=StatsResponse)
async def get_daily_stats(
    service: Annotated[QueryService, Depends(get_query_service)],
    days: Annotated[str | None, Query()] = None,
) -> StatsResponse:
    """Return the most recent daily aggregates, newest date first.

    Args:
        service: Query service bound to the request session.
        days: Number of days to return (default 7).

    Returns:
        StatsResponse: Period label and aggregate rows.
    """
    period_days = coerce_limit(days, DEFAULT_STATS_DAYS)
    rows = await service.get_daily_stats(period_days)
    return StatsResponse(
        period=f"Last {period_days} days",
        data=[DailyStatOut.model_validate(row) for row in rows],
    )

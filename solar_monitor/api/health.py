"""
Health check endpoint for the solar monitor API.

Provides a simple GET /health endpoint for Docker HEALTHCHECK and internal
monitoring. It does not touch the database.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Return a simple health status.

    Returns:
        dict: ``{"success": True, "status": "ok"}``.
    """
    return {"success": True, "status": "ok"}

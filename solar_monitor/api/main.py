"""
FastAPI application entry point for the Solar Monitor API.

Provides the root service descriptor, registers the routers, and maps domain
errors to the ``{"success": false, "error": ...}`` envelope. The lifespan
configures logging and creates the database tables; a table creation
failure is logged and does not stop the API from starting.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from solar_monitor import __version__
from solar_monitor.api.health import router as health_router
from solar_monitor.api.solar_data import router as solar_data_router
from solar_monitor.api.stats import router as stats_router
from solar_monitor.config import get_settings
from solar_monitor.db.session import create_tables, dispose_engine, init_engine
from solar_monitor.errors import StoreError, ValidationError
from solar_monitor.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: logging, engine and table setup, shutdown.

    Startup:
        - Configures JSON logging at LOG_LEVEL.
        - Initializes the engine and creates missing tables.

    Shutdown:
        - Disposes the engine.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    init_engine()
    try:
        await create_tables()
        logger.info("Database tables initialized")
    except Exception:
        logger.exception("Database initialization error")

    logger.info("Solar Monitor API ready (environment=%s)", settings.environment)
    yield
    await dispose_engine()
    logger.info("Solar Monitor API shutting down")


app = FastAPI(
    title="Solar Monitor API",
    description="Telemetry ingestion and query API for a fleet of solar panels.",
    version=__version__,
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(solar_data_router)
app.include_router(stats_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


@app.get("/")
async def root() -> dict:
    """Root service descriptor.

    Returns:
        dict: Service name, status, version and endpoint list.
    """
    return {
        "success": True,
        "message": "Solar Power Monitoring API",
        "status": "active",
        "version": __version__,
        "endpoints": {
            "get_data": "GET /api/solar-data",
            "save_data": "POST /api/solar-data",
            "get_panel": "GET /api/solar-data/:panelName",
            "get_stats": "GET /api/stats",
            "delete_old": "DELETE /api/solar-data/cleanup/:days",
        },
    }

"""
Pydantic response models shared by the API routers.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReadingOut(BaseModel):
    """Persisted panel reading."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    power: float | None
    efficiency: int | None
    status: str | None
    temp: int | None
    dirt_level: int | None
    dust_accumulation: str | None
    recorded_at: datetime.datetime


class DailyStatOut(BaseModel):
    """Daily aggregate row."""

    model_config = ConfigDict(from_attributes=True)

    date: datetime.date
    total_power: float | None
    avg_efficiency: float | None
    total_energy: float | None
    clean_panels: int
    dirty_panels: int
    updated_at: datetime.datetime


class SnapshotResponse(BaseModel):
    """Response for GET /api/solar-data."""

    success: bool = True
    count: int
    data: list[ReadingOut]
    timestamp: datetime.datetime


class IngestResponse(BaseModel):
    """Response for POST /api/solar-data."""

    success: bool = True
    message: str
    data: list[ReadingOut]
    timestamp: datetime.datetime


class HistoryResponse(BaseModel):
    """Response for GET /api/solar-data/{panelName}."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    panel_name: str = Field(alias="panelName")
    count: int
    data: list[ReadingOut]


class StatsResponse(BaseModel):
    """Response for GET /api/stats."""

    success: bool = True
    period: str
    data: list[DailyStatOut]


class CleanupResponse(BaseModel):
    """Response for DELETE /api/solar-data/cleanup/{days}."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned with 4xx/5xx responses."""

    success: bool = False
    error: str

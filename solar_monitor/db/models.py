"""
SQLAlchemy ORM models for the solar monitor database.

Defines PanelReading (raw per-panel samples) and DailyStat (one rollup row
per calendar date). DailyStat is keyed by date so the ingest upsert can use
ON CONFLICT (date) for an atomic insert-or-replace.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import datetime

from sqlalchemy import Date, DateTime, Double, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all solar monitor ORM models."""

    pass


class PanelReading(Base):
    """One sample from one solar panel.

    Many readings share a name; the name identifies the panel, the id
    identifies the reading.

    Attributes:
        id: Auto-increment identifier assigned by the database.
        name: Panel name.
        power: Output power in watts.
        efficiency: Efficiency in percent (0-100).
        status: Free-form status string (online/offline/fault).
        temp: Panel temperature in degrees.
        dirt_level: Dirt level (0-100). Below 10 is clean, 30 and up is dirty.
        dust_accumulation: Free-form dust description.
        recorded_at: Server-side persistence timestamp (UTC).
    """

    __tablename__ = "solar_panels"
    __table_args__ = (Index("ix_solar_panels_name_recorded_at", "name", "recorded_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    power: Mapped[float | None] = mapped_column(Double, nullable=True)
    efficiency: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    temp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dirt_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dust_accumulation: Mapped[str | None] = mapped_column(String(20), nullable=True)
    recorded_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the PanelReading."""
        return (
            f"PanelReading(id={self.id!r}, name={self.name!r}, "
            f"recorded_at={self.recorded_at!r})"
        )


class DailyStat(Base):
    """Per-day aggregate derived from the most recent ingest batch of that day.

    Attributes:
        date: UTC calendar date, primary key.
        total_power: Total power as supplied by the client.
        avg_efficiency: Average efficiency as supplied by the client.
        total_energy: Daily energy total. Never written by ingest.
        clean_panels: Readings in the batch with dirt_level < 10.
        dirty_panels: Readings in the batch with dirt_level >= 30.
        updated_at: Timestamp of the last upsert.
    """

    __tablename__ = "daily_stats"

    date: Mapped[datetime.date] = mapped_column(Date, primary_key=True)
    total_power: Mapped[float | None] = mapped_column(Double, nullable=True)
    avg_efficiency: Mapped[float | None] = mapped_column(Double, nullable=True)
    total_energy: Mapped[float | None] = mapped_column(Double, nullable=True)
    clean_panels: Mapped[int] = mapped_column(Integer, nullable=False)
    dirty_panels: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the DailyStat."""
        return (
            f"DailyStat(date={self.date!r}, total_power={self.total_power!r}, "
            f"clean_panels={self.clean_panels!r}, dirty_panels={self.dirty_panels!r})"
        )

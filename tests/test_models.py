"""
Tests for the PanelReading and DailyStat SQLAlchemy models.

CHANGELOG:
- 2026-10-17: Initial creation
"""

import datetime

from sqlalchemy import Date, DateTime, Double, Integer, String, inspect

from solar_monitor.db.models import Base, DailyStat, PanelReading


class TestPanelReading:
    """solar_panels table layout."""

    def test_table_name(self) -> None:
        assert PanelReading.__tablename__ == "solar_panels"
        assert "solar_panels" in Base.metadata.tables

    def test_columns(self) -> None:
        column_names = [col.key for col in inspect(PanelReading).column_attrs]
        assert column_names == [
            "id",
            "name",
            "power",
            "efficiency",
            "status",
            "temp",
            "dirt_level",
            "dust_accumulation",
            "recorded_at",
        ]

    def test_primary_key_is_id(self) -> None:
        pk = [col.name for col in PanelReading.__table__.primary_key.columns]
        assert pk == ["id"]
        assert isinstance(PanelReading.__table__.columns["id"].type, Integer)

    def test_name_is_required_string(self) -> None:
        col = PanelReading.__table__.columns["name"]
        assert isinstance(col.type, String)
        assert col.type.length == 50
        assert col.nullable is False

    def test_power_is_double(self) -> None:
        assert isinstance(PanelReading.__table__.columns["power"].type, Double)

    def test_recorded_at_is_timestamptz_with_default(self) -> None:
        col = PanelReading.__table__.columns["recorded_at"]
        assert isinstance(col.type, DateTime)
        assert col.type.timezone is True
        assert col.server_default is not None

    def test_name_recorded_at_index(self) -> None:
        indexes = {ix.name: [c.name for c in ix.columns] for ix in PanelReading.__table__.indexes}
        assert indexes["ix_solar_panels_name_recorded_at"] == ["name", "recorded_at"]

    def test_repr(self) -> None:
        reading = PanelReading(
            id=1,
            name="P1",
            recorded_at=datetime.datetime(2026, 10, 17, tzinfo=datetime.UTC),
        )
        assert "P1" in repr(reading)


class TestDailyStat:
    """daily_stats table layout."""

    def test_table_name(self) -> None:
        assert DailyStat.__tablename__ == "daily_stats"

    def test_date_is_primary_key(self) -> None:
        pk = [col.name for col in DailyStat.__table__.primary_key.columns]
        assert pk == ["date"]
        assert isinstance(DailyStat.__table__.columns["date"].type, Date)

    def test_counts_are_required(self) -> None:
        for name in ("clean_panels", "dirty_panels"):
            col = DailyStat.__table__.columns[name]
            assert isinstance(col.type, Integer)
            assert col.nullable is False

    def test_totals_nullable(self) -> None:
        for name in ("total_power", "avg_efficiency", "total_energy"):
            assert DailyStat.__table__.columns[name].nullable is True

    def test_repr(self) -> None:
        stat = DailyStat(date=datetime.date(2026, 10, 17), clean_panels=1, dirty_panels=2)
        assert "2026" in repr(stat)

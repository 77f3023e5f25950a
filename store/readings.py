"""
SQLAlchemy-backed reading store.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func, select

from database import get_db_session
from db_models import ReadingRow
from engine.enums import WeatherCondition
from engine.models import Reading, WeatherSnapshot, as_utc
from store.base import ReadingStore
from store.sql import translate_errors


def _weather_from_row(row: ReadingRow) -> Optional[WeatherSnapshot]:
    snapshot = WeatherSnapshot(
        condition=WeatherCondition(row.weather_condition) if row.weather_condition else None,
        cloud_cover=row.cloud_cover,
        precipitation=row.precipitation,
        irradiance=row.irradiance,
        temperature=row.temperature,
        wind_speed=row.wind_speed,
    )
    return None if snapshot.is_empty() else snapshot


def reading_from_row(row: ReadingRow) -> Reading:
    return Reading(
        id=row.reading_id,
        unit_id=row.unit_id,
        timestamp=as_utc(row.timestamp),
        energy_wh=row.energy_wh,
        interval_hours=row.interval_hours,
        weather=_weather_from_row(row),
    )


def reading_to_row(reading: Reading) -> ReadingRow:
    w = reading.weather or WeatherSnapshot()
    return ReadingRow(
        reading_id=reading.id,
        unit_id=reading.unit_id,
        timestamp=as_utc(reading.timestamp),
        energy_wh=reading.energy_wh,
        interval_hours=reading.interval_hours,
        weather_condition=w.condition.value if w.condition else None,
        cloud_cover=w.cloud_cover,
        precipitation=w.precipitation,
        irradiance=w.irradiance,
        temperature=w.temperature,
        wind_speed=w.wind_speed,
    )


class SqlReadingStore(ReadingStore):
    @translate_errors
    def find_readings(
        self,
        unit_id: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> List[Reading]:
        stmt = select(ReadingRow).where(ReadingRow.unit_id == unit_id)
        if since is not None:
            stmt = stmt.where(ReadingRow.timestamp >= as_utc(since))
        if until is not None:
            stmt = stmt.where(ReadingRow.timestamp <= as_utc(until))
        stmt = stmt.order_by(ReadingRow.timestamp.asc(), ReadingRow.reading_id.asc())
        with get_db_session() as db:
            return [reading_from_row(r) for r in db.execute(stmt).scalars()]

    @translate_errors
    def count_readings(self) -> int:
        with get_db_session() as db:
            return int(db.execute(select(func.count()).select_from(ReadingRow)).scalar_one())

    @translate_errors
    def add_readings(self, readings: Iterable[Reading]) -> int:
        rows = [reading_to_row(r) for r in readings]
        with get_db_session() as db:
            db.add_all(rows)
        return len(rows)

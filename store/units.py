"""
SQLAlchemy-backed unit store.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select

from database import get_db_session
from db_models import UnitRow
from engine.enums import UnitStatus
from engine.models import Location, Unit
from store.base import UnitStore
from store.sql import translate_errors


def unit_from_row(row: UnitRow) -> Unit:
    location = None
    if row.latitude is not None and row.longitude is not None:
        location = Location(
            latitude=row.latitude,
            longitude=row.longitude,
            city=row.city,
            country=row.country,
        )
    return Unit(
        id=row.unit_id,
        capacity_w=row.capacity_w,
        status=UnitStatus(row.status),
        location=location,
    )


def unit_to_row(unit: Unit, serial_number: Optional[str] = None) -> UnitRow:
    loc = unit.location
    return UnitRow(
        unit_id=unit.id,
        serial_number=serial_number,
        capacity_w=unit.capacity_w,
        status=unit.status.value,
        latitude=loc.latitude if loc else None,
        longitude=loc.longitude if loc else None,
        city=loc.city if loc else None,
        country=loc.country if loc else None,
    )


class SqlUnitStore(UnitStore):
    @translate_errors
    def find_active_units(self) -> List[Unit]:
        stmt = (
            select(UnitRow)
            .where(UnitRow.status == UnitStatus.ACTIVE.value)
            .order_by(UnitRow.unit_id.asc())
        )
        with get_db_session() as db:
            return [unit_from_row(r) for r in db.execute(stmt).scalars()]

    @translate_errors
    def find_unit(self, unit_id: str) -> Optional[Unit]:
        with get_db_session() as db:
            row = db.get(UnitRow, unit_id)
            return unit_from_row(row) if row is not None else None

    @translate_errors
    def count_units(self, status: Optional[UnitStatus] = None) -> int:
        stmt = select(func.count()).select_from(UnitRow)
        if status is not None:
            stmt = stmt.where(UnitRow.status == UnitStatus(status).value)
        with get_db_session() as db:
            return int(db.execute(stmt).scalar_one())

    @translate_errors
    def add_unit(self, unit: Unit, serial_number: Optional[str] = None) -> Unit:
        with get_db_session() as db:
            db.add(unit_to_row(unit, serial_number))
        return unit

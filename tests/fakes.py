"""
In-memory store doubles and record builders shared by the test modules.
"""

from __future__ import annotations

import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from engine.enums import FindingType, GroupField, UnitStatus, WeatherCondition
from engine.models import AffectedPeriod, Finding, Location, Reading, Unit, WeatherSnapshot
from store.base import FindingStore, ReadingStore, UnitStore
from store.criteria import FindingCriteria

T0 = datetime(2026, 6, 1, tzinfo=timezone.utc)


def at(day: int = 0, hour: int = 12, minute: int = 0) -> datetime:
    return T0 + timedelta(days=day, hours=hour, minutes=minute)


def reading(
    ts: datetime,
    energy: float,
    unit_id: str = "u1",
    interval: float = 2.0,
    rid: Optional[str] = None,
    **weather,
) -> Reading:
    if "condition" in weather and isinstance(weather["condition"], str):
        weather["condition"] = WeatherCondition(weather["condition"])
    return Reading(
        id=rid or f"r-{ts:%Y%m%d%H%M}-{uuid.uuid4().hex[:6]}",
        unit_id=unit_id,
        timestamp=ts,
        energy_wh=energy,
        interval_hours=interval,
        weather=WeatherSnapshot(**weather) if weather else None,
    )


def unit(
    uid: str = "u1",
    capacity_w: float = 5000.0,
    status: UnitStatus = UnitStatus.ACTIVE,
    location: Optional[Location] = None,
) -> Unit:
    return Unit(id=uid, capacity_w=capacity_w, status=status, location=location)


def finding(
    unit_id: str = "u1",
    ftype: FindingType = FindingType.NIGHTTIME_GENERATION,
    start: Optional[datetime] = None,
    detected_at: Optional[datetime] = None,
    **kwargs,
) -> Finding:
    start = start or at(0, 22)
    return Finding(
        unit_id=unit_id,
        type=ftype,
        severity=kwargs.pop("severity", ftype.default_severity),
        affected_period=AffectedPeriod(start=start, end=start),
        description="test finding",
        detected_at=detected_at or start,
        **kwargs,
    )


class InMemoryReadingStore(ReadingStore):
    def __init__(self, readings=()):
        self.readings: List[Reading] = list(readings)
        self.calls = 0

    def find_readings(self, unit_id, since=None, until=None):
        self.calls += 1
        out = [
            r for r in self.readings
            if r.unit_id == unit_id
            and (since is None or r.timestamp >= since)
            and (until is None or r.timestamp <= until)
        ]
        return sorted(out, key=lambda r: r.timestamp)

    def count_readings(self):
        return len(self.readings)


class InMemoryUnitStore(UnitStore):
    def __init__(self, units=()):
        self.units: Dict[str, Unit] = {u.id: u for u in units}

    def find_active_units(self):
        return [u for u in self.units.values() if u.status is UnitStatus.ACTIVE]

    def find_unit(self, unit_id):
        return self.units.get(unit_id)

    def count_units(self, status=None):
        return sum(1 for u in self.units.values() if status is None or u.status is status)


class InMemoryFindingStore(FindingStore):
    def __init__(self, findings=()):
        self.findings: List[Finding] = []
        for f in findings:
            f.id = f.id or str(uuid.uuid4())
            self.findings.append(f)

    def find_open_or_acknowledged(self, unit_id, finding_type, period_start):
        for f in self.findings:
            if f.dedup_key == (unit_id, finding_type, period_start) and f.status.value in ("OPEN", "ACKNOWLEDGED"):
                return f
        return None

    def insert(self, finding):
        finding.id = finding.id or str(uuid.uuid4())
        self.findings.append(finding)
        return finding

    def _match(self, c: FindingCriteria) -> List[Finding]:
        out = [
            f for f in self.findings
            if (not c.unit_ids or f.unit_id in c.unit_ids)
            and (not c.types or f.type in c.types)
            and (not c.severities or f.severity in c.severities)
            and (not c.statuses or f.status in c.statuses)
            and (c.detected_from is None or f.detected_at >= c.detected_from)
            and (c.detected_to is None or f.detected_at <= c.detected_to)
        ]
        return sorted(out, key=lambda f: f.detected_at, reverse=c.newest_first)

    def find(self, criteria):
        items = self._match(criteria)[criteria.offset:]
        return items[: criteria.limit] if criteria.limit is not None else items

    def count(self, criteria):
        return len(self._match(criteria))

    def count_by_group(self, criteria, group):
        attr = GroupField(group).value
        return dict(Counter(getattr(f, attr).value for f in self._match(criteria)))

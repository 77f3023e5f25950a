"""
Domain records shared by detection, recording and analytics: readings, units and findings.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from engine.enums import FindingStatus, FindingType, Severity, UnitStatus, WeatherCondition

MIN_INTERVAL_HOURS = 0.1
MAX_INTERVAL_HOURS = 24.0


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class WeatherSnapshot:
    condition: Optional[WeatherCondition] = None
    cloud_cover: Optional[float] = None
    precipitation: Optional[float] = None
    irradiance: Optional[float] = None
    temperature: Optional[float] = None
    wind_speed: Optional[float] = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (
                self.condition, self.cloud_cover, self.precipitation,
                self.irradiance, self.temperature, self.wind_speed,
            )
        )


@dataclass(frozen=True)
class Reading:
    id: str
    unit_id: str
    timestamp: datetime
    energy_wh: float
    interval_hours: float = 2.0
    weather: Optional[WeatherSnapshot] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.energy_wh) or self.energy_wh < 0:
            raise ValueError(f"reading {self.id}: energy must be a finite value >= 0, got {self.energy_wh}")
        if not MIN_INTERVAL_HOURS <= self.interval_hours <= MAX_INTERVAL_HOURS:
            raise ValueError(
                f"reading {self.id}: interval_hours must be within "
                f"[{MIN_INTERVAL_HOURS}, {MAX_INTERVAL_HOURS}], got {self.interval_hours}"
            )
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    @property
    def hour(self) -> int:
        return self.timestamp.hour


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True)
class Unit:
    id: str
    capacity_w: float
    status: UnitStatus = UnitStatus.ACTIVE
    location: Optional[Location] = None

    @property
    def capacity_kw(self) -> float:
        return self.capacity_w / 1000.0


@dataclass(frozen=True)
class AffectedPeriod:
    start: datetime
    end: Optional[datetime] = None


@dataclass(frozen=True)
class FindingMetadata:
    expected_value: Optional[float] = None
    actual_value: Optional[float] = None
    deviation: Optional[float] = None
    threshold: Optional[str] = None
    # weather mismatch
    weather_score: Optional[int] = None
    # frozen generation
    streak_length: Optional[int] = None
    weather_changed: Optional[bool] = None


@dataclass
class Finding:
    unit_id: str
    type: FindingType
    severity: Severity
    affected_period: AffectedPeriod
    description: str
    metadata: FindingMetadata = field(default_factory=FindingMetadata)
    reading_ids: Tuple[str, ...] = ()
    detected_at: datetime = field(default_factory=utcnow)
    status: FindingStatus = FindingStatus.OPEN
    id: Optional[str] = None
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_notes: Optional[str] = None

    @property
    def dedup_key(self) -> Tuple[str, FindingType, datetime]:
        return (self.unit_id, self.type, as_utc(self.affected_period.start))

"""
Enumerations for finding types, severities, lifecycle states and unit/weather categories.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class FindingType(str, Enum):
    NIGHTTIME_GENERATION = "NIGHTTIME_GENERATION"
    ZERO_GENERATION_CLEAR_SKY = "ZERO_GENERATION_CLEAR_SKY"
    ENERGY_EXCEEDING_THRESHOLD = "ENERGY_EXCEEDING_THRESHOLD"
    HIGH_GENERATION_BAD_WEATHER = "HIGH_GENERATION_BAD_WEATHER"
    LOW_GENERATION_CLEAR_WEATHER = "LOW_GENERATION_CLEAR_WEATHER"
    FROZEN_GENERATION = "FROZEN_GENERATION"

    @property
    def default_severity(self) -> Severity:
        return _DEFAULT_SEVERITY[self]


_DEFAULT_SEVERITY: dict[FindingType, Severity] = {
    FindingType.NIGHTTIME_GENERATION: Severity.CRITICAL,
    FindingType.ZERO_GENERATION_CLEAR_SKY: Severity.CRITICAL,
    FindingType.ENERGY_EXCEEDING_THRESHOLD: Severity.CRITICAL,
    FindingType.HIGH_GENERATION_BAD_WEATHER: Severity.WARNING,
    FindingType.LOW_GENERATION_CLEAR_WEATHER: Severity.WARNING,
    FindingType.FROZEN_GENERATION: Severity.WARNING,
}


class FindingStatus(str, Enum):
    OPEN = "OPEN"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    RESOLVED = "RESOLVED"
    FALSE_POSITIVE = "FALSE_POSITIVE"

    @classmethod
    def unresolved(cls) -> tuple[FindingStatus, ...]:
        return (cls.OPEN, cls.ACKNOWLEDGED)


class UnitStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    MAINTENANCE = "MAINTENANCE"


class WeatherCondition(str, Enum):
    clear = "clear"
    partly_cloudy = "partly_cloudy"
    overcast = "overcast"
    rain = "rain"


class SolarRating(str, Enum):
    excellent = "Excellent"
    moderate = "Moderate"
    poor = "Poor"


class HealthRating(str, Enum):
    excellent = "Excellent"
    good = "Good"
    fair = "Fair"
    poor = "Poor"


class GroupField(str, Enum):
    type = "type"
    severity = "severity"
    status = "status"

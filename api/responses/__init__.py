"""
Response models for API endpoints, built from the engine's result dataclasses.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from engine.enums import FindingStatus, FindingType, HealthRating, Severity, SolarRating, WeatherCondition


class ApiModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class AffectedPeriodOut(ApiModel):
    start: datetime
    end: Optional[datetime] = None


class FindingMetadataOut(ApiModel):
    expected_value: Optional[float] = None
    actual_value: Optional[float] = None
    deviation: Optional[float] = None
    threshold: Optional[str] = None
    weather_score: Optional[int] = None
    streak_length: Optional[int] = None
    weather_changed: Optional[bool] = None


class FindingOut(ApiModel):
    id: Optional[str] = None
    unit_id: str
    type: FindingType
    severity: Severity
    status: FindingStatus
    detected_at: datetime
    affected_period: AffectedPeriodOut
    reading_ids: List[str]
    description: str
    metadata: FindingMetadataOut
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_notes: Optional[str] = None


class FindingPage(ApiModel):
    items: List[FindingOut]
    total: int
    limit: int
    offset: int


class FindingStatsOut(ApiModel):
    by_status: Dict[str, int]
    by_severity: Dict[str, int]
    by_type: Dict[str, int]
    recent: int
    total: int


class DetectionRunOut(ApiModel):
    started_at: datetime
    finished_at: datetime
    units_processed: int
    findings_detected: int
    findings_saved: int
    failed_units: List[str]
    skipped_units: int
    duration_seconds: float


class DetectionStatusOut(ApiModel):
    last_run: Optional[Dict[str, Any]] = None
    active_units: int
    total_readings: int


class DailyPerformanceOut(ApiModel):
    date: str
    actual_kwh: float
    expected_kwh: float
    performance_ratio: int
    weather_score: int
    cloud_cover: int
    precipitation: float
    temperature: float


class DayRatioOut(ApiModel):
    date: str
    ratio: int


class PerformanceSummaryOut(ApiModel):
    avg_performance_ratio: int
    total_actual_kwh: float
    total_expected_kwh: float
    best_day: Optional[DayRatioOut] = None
    worst_day: Optional[DayRatioOut] = None


class WeatherPerformanceOut(ApiModel):
    unit_id: str
    capacity_w: float
    days: int
    daily: List[DailyPerformanceOut]
    summary: PerformanceSummaryOut


class GroupShareOut(ApiModel):
    key: Union[FindingType, Severity, FindingStatus]
    count: int
    percentage: int


class DailyCountOut(ApiModel):
    date: str
    count: int


class AnomalyDistributionOut(ApiModel):
    unit_id: str
    days: int
    total: int
    by_type: List[GroupShareOut]
    by_severity: List[GroupShareOut]
    by_status: List[GroupShareOut]
    trend: List[DailyCountOut]


class HealthFactorsOut(ApiModel):
    anomaly_impact: int
    performance_impact: int
    uptime_impact: int
    resolution_efficiency: int


class SystemHealthOut(ApiModel):
    unit_id: str
    days: int
    health_score: int
    rating: HealthRating
    factors: HealthFactorsOut
    recommendations: List[str]


class CurrentConditionsOut(ApiModel):
    cloud_cover: float
    precipitation: float
    solar_irradiance: float
    temperature: float
    wind_speed: float
    condition: Optional[WeatherCondition] = None
    is_day: bool


class ImpactBreakdownOut(ApiModel):
    cloud_impact: int
    rain_impact: int
    irradiance_boost: int
    temp_impact: int
    wind_boost: int


class SolarImpactOut(ApiModel):
    score: int
    rating: SolarRating
    insight: str
    breakdown: ImpactBreakdownOut


class LocationOut(ApiModel):
    city: str
    latitude: float
    longitude: float


class CurrentWeatherOut(ApiModel):
    current: CurrentConditionsOut
    solar_impact: SolarImpactOut
    location: LocationOut
    timestamp: datetime

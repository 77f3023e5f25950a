"""
Derived analytics per solar unit.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.responses import AnomalyDistributionOut, SystemHealthOut, WeatherPerformanceOut
from api.routes.exception import handle_exceptions
from services.analytics_service import analytics_service

router = APIRouter(tags=["Analytics"])


@router.get(
    "/analytics/weather-performance/{unit_id}",
    response_model=WeatherPerformanceOut,
    summary="Daily actual vs weather-expected energy (days 1-30)",
)
@handle_exceptions
async def weather_performance(unit_id: str, days: int = 7) -> WeatherPerformanceOut:
    result = await analytics_service.weather_performance(unit_id, days)
    return WeatherPerformanceOut.model_validate(result)


@router.get(
    "/analytics/anomaly-distribution/{unit_id}",
    response_model=AnomalyDistributionOut,
    summary="Findings grouped by type, severity and status with a daily trend (days 1-90)",
)
@handle_exceptions
async def anomaly_distribution(unit_id: str, days: int = 30) -> AnomalyDistributionOut:
    result = await analytics_service.anomaly_distribution(unit_id, days)
    return AnomalyDistributionOut.model_validate(result)


@router.get(
    "/analytics/system-health/{unit_id}",
    response_model=SystemHealthOut,
    summary="Composite health score with recommendations (days 1-30)",
)
@handle_exceptions
async def system_health(unit_id: str, days: int = 7) -> SystemHealthOut:
    result = await analytics_service.system_health(unit_id, days)
    return SystemHealthOut.model_validate(result)

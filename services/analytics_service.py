"""
Async facade over the analytics engine; store-bound work runs in worker threads.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
from typing import Optional

from config import settings
from engine.analytics import AnalyticsEngine, AnomalyDistribution, SystemHealth, WeatherAdjustedPerformance
from store.base import FindingStore, ReadingStore, UnitStore
from store.findings import SqlFindingStore
from store.readings import SqlReadingStore
from store.units import SqlUnitStore


class AnalyticsService:
    def __init__(
        self,
        units: Optional[UnitStore] = None,
        readings: Optional[ReadingStore] = None,
        findings: Optional[FindingStore] = None,
    ) -> None:
        self.engine = AnalyticsEngine(
            units or SqlUnitStore(),
            readings or SqlReadingStore(),
            findings or SqlFindingStore(),
        )
        self._semaphore = asyncio.Semaphore(max(1, settings.detection_max_parallel_units))

    async def weather_performance(self, unit_id: str, days: int = 7) -> WeatherAdjustedPerformance:
        async with self._semaphore:
            return await asyncio.to_thread(self.engine.get_weather_adjusted_performance, unit_id, days)

    async def anomaly_distribution(self, unit_id: str, days: int = 30) -> AnomalyDistribution:
        async with self._semaphore:
            return await asyncio.to_thread(self.engine.get_anomaly_distribution, unit_id, days)

    async def system_health(self, unit_id: str, days: int = 7) -> SystemHealth:
        async with self._semaphore:
            return await asyncio.to_thread(self.engine.get_system_health, unit_id, days)


analytics_service = AnalyticsService()

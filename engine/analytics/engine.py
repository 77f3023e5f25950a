"""
On-demand analytics over the reading and finding stores.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from config import settings
from engine.analytics.distribution import AnomalyDistribution, daily_trend, shares
from engine.analytics.health import SystemHealth, compute_health
from engine.analytics.performance import (
    WeatherAdjustedPerformance,
    daily_performance,
    performance_window,
    summarize,
)
from engine.enums import GroupField
from engine.exceptions import NotFoundError, StoreUnavailable, ValidationError
from engine.models import Unit, as_utc, utcnow
from store.base import FindingStore, ReadingStore, UnitStore
from store.criteria import FindingCriteria

log = logging.getLogger(__name__)


def _check_days(days: int, upper: int) -> int:
    if not isinstance(days, int) or isinstance(days, bool) or not 1 <= days <= upper:
        raise ValidationError(f"days must be an integer within [1, {upper}], got {days!r}")
    return days


class AnalyticsEngine:
    def __init__(self, units: UnitStore, readings: ReadingStore, findings: FindingStore) -> None:
        self._units = units
        self._readings = readings
        self._findings = findings

    def _unit(self, unit_id: str) -> Unit:
        unit = self._units.find_unit(unit_id)
        if unit is None:
            raise NotFoundError(f"solar unit {unit_id} not found")
        return unit

    def _window_criteria(self, unit_id: str, days: int, now: datetime) -> FindingCriteria:
        return FindingCriteria(
            unit_ids=(unit_id,),
            detected_from=now - timedelta(days=days),
            detected_to=now,
            newest_first=False,
        )

    def get_weather_adjusted_performance(
        self, unit_id: str, days: int = 7, now: Optional[datetime] = None,
    ) -> WeatherAdjustedPerformance:
        _check_days(days, settings.performance_days_max)
        now = as_utc(now) if now is not None else utcnow()
        unit = self._unit(unit_id)
        start, end = performance_window(days, now)
        readings = self._readings.find_readings(unit.id, since=start, until=end)
        daily = daily_performance(readings, unit.capacity_w)
        return WeatherAdjustedPerformance(
            unit_id=unit.id,
            capacity_w=unit.capacity_w,
            days=days,
            daily=daily,
            summary=summarize(daily),
        )

    def get_anomaly_distribution(
        self, unit_id: str, days: int = 30, now: Optional[datetime] = None,
    ) -> AnomalyDistribution:
        _check_days(days, settings.distribution_days_max)
        now = as_utc(now) if now is not None else utcnow()
        unit = self._unit(unit_id)
        criteria = self._window_criteria(unit.id, days, now)
        total = self._findings.count(criteria)

        def _grouped(group: GroupField):
            return shares(self._findings.count_by_group(criteria, group), total, group)

        return AnomalyDistribution(
            unit_id=unit.id,
            days=days,
            total=total,
            by_type=_grouped(GroupField.type),
            by_severity=_grouped(GroupField.severity),
            by_status=_grouped(GroupField.status),
            trend=daily_trend(self._findings.find(criteria)),
        )

    def get_system_health(
        self, unit_id: str, days: int = 7, now: Optional[datetime] = None,
    ) -> SystemHealth:
        _check_days(days, settings.health_days_max)
        now = as_utc(now) if now is not None else utcnow()
        unit = self._unit(unit_id)
        findings = self._findings.find(self._window_criteria(unit.id, days, now))

        performance: Optional[float] = None
        try:
            perf = self.get_weather_adjusted_performance(unit.id, days, now)
            if perf.has_data:
                performance = float(perf.summary.avg_performance_ratio)
        except StoreUnavailable as exc:
            log.warning("Performance unavailable for unit %s, using default: %s", unit.id, exc)

        return compute_health(unit.id, findings, days, performance)

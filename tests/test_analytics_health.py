"""
Test Suite for the system health score

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError as SettingsError

from config import Settings, settings
from engine.analytics import AnalyticsEngine
from engine.analytics.health import compute_health, rating_for, resolution_score
from engine.enums import FindingStatus, FindingType, HealthRating
from engine.exceptions import NotFoundError, StoreUnavailable
from fakes import InMemoryFindingStore, InMemoryReadingStore, InMemoryUnitStore, at, finding, reading, unit

NOW = at(7, 12)


def test_quiet_unit_with_default_performance():
    h = compute_health("u1", [], 7, None)
    assert h.health_score == 90
    assert h.rating is HealthRating.excellent
    assert h.factors.performance_impact == 75
    assert h.recommendations == ["System is operating optimally, continue monitoring"]


def test_troubled_unit_collects_recommendations():
    resolved = finding(
        ftype=FindingType.FROZEN_GENERATION,
        start=at(3, 10),
        status=FindingStatus.RESOLVED,
    )
    resolved.resolved_at = resolved.detected_at + timedelta(hours=72)
    fs = [finding(start=at(1, 22)), finding(start=at(2, 22)), resolved]

    h = compute_health("u1", fs, 7, 60.0)
    assert h.factors.anomaly_impact == 75
    assert h.factors.uptime_impact == 71
    assert h.factors.resolution_efficiency == 70
    assert h.health_score == 68
    assert h.rating is HealthRating.fair
    assert h.recommendations == [
        "Address 2 critical anomalies immediately",
        "Performance is below expectations, check for panel obstructions",
        "System uptime is low, schedule maintenance",
        "Improve anomaly resolution time for better system health",
    ]


def test_single_critical_uses_singular_noun():
    h = compute_health("u1", [finding(start=at(1, 22))], 7, 90.0)
    assert h.recommendations[0] == "Address 1 critical anomaly immediately"


def test_scores_are_clamped():
    fs = [finding(start=at(d, 22)) for d in range(10)]
    h = compute_health("u1", fs, 7, 250.0)
    assert h.factors.anomaly_impact == 0
    assert h.factors.uptime_impact == 0
    assert h.factors.performance_impact == 100
    assert h.health_score == 50
    assert h.rating is HealthRating.fair


@pytest.mark.parametrize("score, rating", [
    (85, HealthRating.excellent), (84, HealthRating.good), (70, HealthRating.good),
    (69, HealthRating.fair), (50, HealthRating.fair), (49, HealthRating.poor),
])
def test_rating_bands(score, rating):
    assert rating_for(score) is rating


def test_resolution_score_floor():
    assert resolution_score(None) == 100
    assert resolution_score(24 * 20) == 0


def test_engine_falls_back_when_readings_unavailable():
    class DownReadings(InMemoryReadingStore):
        def find_readings(self, unit_id, since=None, until=None):
            raise StoreUnavailable("timeout")

    engine = AnalyticsEngine(InMemoryUnitStore([unit("u1")]), DownReadings(), InMemoryFindingStore())
    h = engine.get_system_health("u1", days=7, now=NOW)
    assert h.factors.performance_impact == 75
    assert h.health_score == 90


def test_engine_uses_measured_performance():
    ideal = dict(cloud_cover=10, precipitation=0, temperature=25, irradiance=500, wind_speed=10)
    readings = InMemoryReadingStore([
        # 13750 Wh against 27.5 kWh expected
        reading(at(6, 12), 13750, **ideal),
    ])
    engine = AnalyticsEngine(InMemoryUnitStore([unit("u1")]), readings, InMemoryFindingStore())
    h = engine.get_system_health("u1", days=7, now=NOW)
    assert h.factors.performance_impact == 50
    assert "Performance is below expectations, check for panel obstructions" in h.recommendations


def test_engine_unknown_unit():
    engine = AnalyticsEngine(InMemoryUnitStore(), InMemoryReadingStore(), InMemoryFindingStore())
    with pytest.raises(NotFoundError):
        engine.get_system_health("ghost", days=7, now=NOW)


def test_composite_weights_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "health_weight_anomaly", 0.2)
    monkeypatch.setattr(settings, "health_weight_performance", 0.5)
    # 0.2*100 + 0.5*75 + 0.2*100 + 0.1*100 = 87.5
    assert compute_health("u1", [], 7, None).health_score == 88


def test_health_weights_read_from_environment(monkeypatch):
    monkeypatch.setenv("SOLARWATCH_HEALTH_WEIGHT_ANOMALY", "0.2")
    monkeypatch.setenv("SOLARWATCH_HEALTH_WEIGHT_PERFORMANCE", "0.5")
    loaded = Settings()
    assert loaded.health_weight_anomaly == 0.2
    assert loaded.health_weight_performance == 0.5


def test_health_weights_must_sum_to_one():
    with pytest.raises(SettingsError):
        Settings(health_weight_anomaly=0.9)

"""
Weather-adjusted performance: daily actual energy against the energy the unit
should have produced given that day's weather.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config import settings
from engine.impact import score_impact
from engine.models import Reading, as_utc
from engine.rounding import round_half_up, round_to


@dataclass(frozen=True)
class DailyPerformance:
    date: str
    actual_kwh: float
    expected_kwh: float
    performance_ratio: int
    weather_score: int
    cloud_cover: int
    precipitation: float
    temperature: float


@dataclass(frozen=True)
class DayRatio:
    date: str
    ratio: int


@dataclass(frozen=True)
class PerformanceSummary:
    avg_performance_ratio: int = 0
    total_actual_kwh: float = 0.0
    total_expected_kwh: float = 0.0
    best_day: Optional[DayRatio] = None
    worst_day: Optional[DayRatio] = None


@dataclass(frozen=True)
class WeatherAdjustedPerformance:
    unit_id: str
    capacity_w: float
    days: int
    daily: List[DailyPerformance] = field(default_factory=list)
    summary: PerformanceSummary = field(default_factory=PerformanceSummary)

    @property
    def has_data(self) -> bool:
        return bool(self.daily)


def performance_window(days: int, now: datetime) -> Tuple[datetime, datetime]:
    """[00:00 UTC of today - days, 23:59:59.999999 UTC today]."""
    today = as_utc(now).date()
    start = datetime.combine(today - timedelta(days=days), time.min, tzinfo=timezone.utc)
    end = datetime.combine(today, time.max, tzinfo=timezone.utc)
    return start, end


def expected_kwh(capacity_kw: float, weather_score: float) -> float:
    return round_to(capacity_kw * settings.peak_hours_equivalent * weather_score / 100.0, 2)


def _mean_or(values: List[float], default: float) -> float:
    return float(np.mean(values)) if values else default


def _day_weather(readings: Sequence[Reading]) -> Dict[str, float]:
    fields: Dict[str, List[float]] = defaultdict(list)
    for r in readings:
        w = r.weather
        if w is None:
            continue
        for name in ("cloud_cover", "precipitation", "temperature", "irradiance", "wind_speed"):
            value = getattr(w, name)
            if value is not None:
                fields[name].append(value)
    return {
        "cloud_cover": _mean_or(fields["cloud_cover"], settings.default_cloud_cover),
        "precipitation": _mean_or(fields["precipitation"], settings.default_precipitation),
        "temperature": _mean_or(fields["temperature"], settings.default_temperature),
        "irradiance": _mean_or(fields["irradiance"], settings.default_irradiance),
        "wind_speed": _mean_or(fields["wind_speed"], settings.default_wind_speed),
    }


def daily_performance(readings: Iterable[Reading], capacity_w: float) -> List[DailyPerformance]:
    by_day: Dict[str, List[Reading]] = defaultdict(list)
    for r in readings:
        by_day[r.timestamp.date().isoformat()].append(r)

    capacity_kw = capacity_w / 1000.0
    out: List[DailyPerformance] = []
    for day in sorted(by_day):
        day_readings = by_day[day]
        actual = sum(r.energy_wh for r in day_readings) / 1000.0
        weather = _day_weather(day_readings)
        score = score_impact(
            cloud_cover=weather["cloud_cover"],
            precipitation=weather["precipitation"],
            irradiance=weather["irradiance"],
            temperature=weather["temperature"],
            wind_speed=weather["wind_speed"],
        ).score
        expected = expected_kwh(capacity_kw, score)
        ratio = round_half_up(actual / expected * 100) if expected > 0 else 0
        out.append(DailyPerformance(
            date=day,
            actual_kwh=round_to(actual, 2),
            expected_kwh=expected,
            performance_ratio=ratio,
            weather_score=round_half_up(score),
            cloud_cover=round_half_up(weather["cloud_cover"]),
            precipitation=round_to(weather["precipitation"], 1),
            temperature=round_to(weather["temperature"], 1),
        ))
    return out


def summarize(daily: Sequence[DailyPerformance]) -> PerformanceSummary:
    if not daily:
        return PerformanceSummary()

    best = daily[0]
    worst = daily[0]
    for d in daily[1:]:
        if d.performance_ratio > best.performance_ratio:
            best = d
        if d.performance_ratio < worst.performance_ratio:
            worst = d

    return PerformanceSummary(
        avg_performance_ratio=round_half_up(sum(d.performance_ratio for d in daily) / len(daily)),
        total_actual_kwh=round_to(sum(d.actual_kwh for d in daily), 2),
        total_expected_kwh=round_to(sum(d.expected_kwh for d in daily), 2),
        best_day=DayRatio(best.date, best.performance_ratio),
        worst_day=DayRatio(worst.date, worst.performance_ratio),
    )

"""
Weather-performance mismatch: output that contradicts the recorded weather,
either too high under rain or heavy overcast, or too low under clear peak-hour sky.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Optional

from config import settings
from engine.detection.hours import fmt_hour, is_daytime, is_peak
from engine.enums import FindingType, WeatherCondition
from engine.impact import classify_condition, score_impact
from engine.models import AffectedPeriod, Finding, FindingMetadata, Reading, Unit, WeatherSnapshot
from engine.rounding import round_half_up
from engine.window import ReadingWindow

HIGH = FindingType.HIGH_GENERATION_BAD_WEATHER
LOW = FindingType.LOW_GENERATION_CLEAR_WEATHER


def _or(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _weather_score(w: WeatherSnapshot) -> int:
    return score_impact(
        cloud_cover=_or(w.cloud_cover, settings.default_cloud_cover),
        precipitation=_or(w.precipitation, settings.default_precipitation),
        irradiance=_or(w.irradiance, settings.default_irradiance),
        temperature=_or(w.temperature, settings.default_temperature),
        wind_speed=_or(w.wind_speed, settings.default_wind_speed),
    ).score


def _describe_weather(condition: Optional[WeatherCondition], w: WeatherSnapshot) -> str:
    parts = [f"condition={condition.value if condition else 'unknown'}"]
    if w.cloud_cover is not None:
        parts.append(f"cloud={w.cloud_cover:g}%")
    if w.precipitation is not None:
        parts.append(f"precip={w.precipitation:g}mm")
    if w.irradiance is not None:
        parts.append(f"irradiance={w.irradiance:g}W/m2")
    return ", ".join(parts)


def _is_bad_weather(condition: Optional[WeatherCondition], w: WeatherSnapshot) -> bool:
    if condition is WeatherCondition.rain:
        return True
    return (
        condition is WeatherCondition.overcast
        and w.cloud_cover is not None
        and w.cloud_cover > settings.overcast_cloud_cover_pct
    )


def _is_clear_sky(condition: Optional[WeatherCondition], w: WeatherSnapshot) -> bool:
    return (
        condition is WeatherCondition.clear
        and w.cloud_cover is not None
        and w.cloud_cover < settings.clear_sky_cloud_cover_pct
    )


def _finding(unit: Unit, r: Reading, ftype: FindingType, description: str, meta: FindingMetadata) -> Finding:
    return Finding(
        unit_id=unit.id,
        type=ftype,
        severity=ftype.default_severity,
        affected_period=AffectedPeriod(start=r.timestamp, end=r.timestamp),
        reading_ids=(r.id,),
        description=description,
        metadata=meta,
    )


def detect(unit: Unit, window: ReadingWindow) -> List[Finding]:
    high_limit = settings.bad_weather_max_energy_wh
    low_limit = settings.clear_weather_min_energy_wh

    out: List[Finding] = []
    for r in window.newest_first():
        w = r.weather
        if w is None or w.is_empty() or not is_daytime(r.hour):
            continue
        condition = w.condition or classify_condition(w.cloud_cover, w.precipitation)
        weather_text = _describe_weather(condition, w)

        if _is_bad_weather(condition, w) and r.energy_wh > high_limit:
            deviation = round_half_up((r.energy_wh - high_limit) / high_limit * 100)
            out.append(_finding(
                unit, r, HIGH,
                (
                    f"Generated {r.energy_wh:g}Wh at {fmt_hour(r.hour)} under {condition.value} "
                    f"conditions, above the {high_limit:g}Wh expected ceiling. "
                    "Weather data or the energy sensor may be wrong."
                ),
                FindingMetadata(
                    expected_value=high_limit,
                    actual_value=r.energy_wh,
                    deviation=float(deviation),
                    threshold=f"{weather_text}; expected <= {high_limit:g}Wh",
                    weather_score=_weather_score(w),
                ),
            ))

        if is_peak(r.hour) and _is_clear_sky(condition, w) and r.energy_wh < low_limit:
            deviation = round_half_up((low_limit - r.energy_wh) / low_limit * 100)
            out.append(_finding(
                unit, r, LOW,
                (
                    f"Generated only {r.energy_wh:g}Wh at {fmt_hour(r.hour)} under clear skies, "
                    f"below the {low_limit:g}Wh expected minimum. "
                    "Possible soiling, shading or equipment degradation."
                ),
                FindingMetadata(
                    expected_value=low_limit,
                    actual_value=r.energy_wh,
                    deviation=float(deviation),
                    threshold=f"{weather_text}; expected >= {low_limit:g}Wh",
                    weather_score=_weather_score(w),
                ),
            ))
    return out

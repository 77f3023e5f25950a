"""
Solar impact scoring: maps weather observations to a 0-100 production favourability score, a qualitative rating and a short operator insight.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config import settings
from engine.enums import SolarRating, WeatherCondition


@dataclass(frozen=True)
class ImpactBreakdown:
    cloud_impact: int = 0
    rain_impact: int = 0
    irradiance_boost: int = 0
    temp_impact: int = 0
    wind_boost: int = 0


@dataclass(frozen=True)
class SolarImpact:
    score: int
    rating: SolarRating
    breakdown: ImpactBreakdown


def _cloud_impact(cloud_cover: float) -> int:
    for upper, impact in settings.impact_cloud_bands:
        if cloud_cover <= upper:
            return impact
    return settings.impact_cloud_overcast_penalty


def _irradiance_boost(irradiance: float) -> int:
    if irradiance > settings.impact_irradiance_excellent:
        return settings.impact_irradiance_excellent_boost
    if irradiance >= settings.impact_irradiance_good:
        return settings.impact_irradiance_good_boost
    return 0


def rating_for(score: float) -> SolarRating:
    if score >= settings.impact_rating_excellent:
        return SolarRating.excellent
    if score >= settings.impact_rating_moderate:
        return SolarRating.moderate
    return SolarRating.poor


def score_impact(
    cloud_cover: float,
    precipitation: float,
    irradiance: float,
    temperature: float,
    wind_speed: float,
) -> SolarImpact:
    breakdown = ImpactBreakdown(
        cloud_impact=_cloud_impact(cloud_cover),
        rain_impact=settings.impact_rain_penalty if precipitation > 0 else 0,
        irradiance_boost=_irradiance_boost(irradiance),
        temp_impact=settings.impact_hot_penalty if temperature > settings.impact_hot_temperature else 0,
        wind_boost=settings.impact_wind_boost if wind_speed > settings.impact_windy_speed else 0,
    )
    raw = (
        100
        + breakdown.cloud_impact
        + breakdown.rain_impact
        + breakdown.irradiance_boost
        + breakdown.temp_impact
        + breakdown.wind_boost
    )
    score = max(0, min(100, raw))
    return SolarImpact(score=score, rating=rating_for(score), breakdown=breakdown)


def classify_condition(cloud_cover: Optional[float], precipitation: Optional[float]) -> Optional[WeatherCondition]:
    if precipitation is not None and precipitation > 0:
        return WeatherCondition.rain
    if cloud_cover is None:
        return None
    if cloud_cover >= settings.condition_overcast_cloud_cover:
        return WeatherCondition.overcast
    if cloud_cover >= settings.condition_partly_cloudy_cloud_cover:
        return WeatherCondition.partly_cloudy
    return WeatherCondition.clear


def insight(
    impact: SolarImpact,
    cloud_cover: float,
    precipitation: float,
    temperature: float,
    wind_speed: float,
    irradiance: float,
) -> str:
    if precipitation > 0:
        return "Rain detected: reduced output now, cleaner panels afterwards should improve efficiency."

    if impact.rating is SolarRating.excellent:
        if cloud_cover <= 10:
            return "Clear skies: optimal solar production expected."
        return "Good conditions for solar energy generation."

    if impact.rating is SolarRating.moderate:
        if cloud_cover > 50:
            return "Partly cloudy conditions: expect moderate solar production."
        if temperature > settings.impact_hot_temperature:
            return "High temperature may reduce panel efficiency despite good sunlight."
        if wind_speed > settings.impact_windy_speed:
            return "Wind cooling may help panel efficiency in these conditions."
        return "Moderate conditions for solar energy generation."

    if cloud_cover >= settings.condition_overcast_cloud_cover:
        return "Heavy cloud cover is significantly reducing solar production."
    if irradiance < 400:
        return "Low solar irradiance: limited energy generation expected."
    return "Challenging conditions for solar production."

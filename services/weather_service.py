"""
Current weather for a unit's location, scored for solar production impact.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from config import settings
from connectors.open_meteo import OpenMeteoConnector
from engine.exceptions import NotFoundError, UpstreamError
from engine.impact import classify_condition, insight, score_impact
from engine.models import utcnow
from store import weather as weather_cache
from store.base import UnitStore
from store.units import SqlUnitStore

log = logging.getLogger(__name__)

_FIELDS = {
    "cloud_cover": "cloud_cover",
    "precipitation": "precipitation",
    "solar_irradiance": "shortwave_radiation",
    "temperature": "temperature_2m",
    "wind_speed": "wind_speed_10m",
}


def _number(current: Dict[str, Any], key: str) -> float:
    value = current.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UpstreamError(f"Open-Meteo field '{key}' missing or not numeric")
    return float(value)


def build_report(current: Dict[str, Any], latitude: float, longitude: float, city: Optional[str]) -> Dict[str, Any]:
    values = {name: _number(current, key) for name, key in _FIELDS.items()}
    impact = score_impact(
        cloud_cover=values["cloud_cover"],
        precipitation=values["precipitation"],
        irradiance=values["solar_irradiance"],
        temperature=values["temperature"],
        wind_speed=values["wind_speed"],
    )
    condition = classify_condition(values["cloud_cover"], values["precipitation"])
    return {
        "current": {
            **values,
            "condition": condition.value if condition else None,
            "is_day": current.get("is_day") == 1,
        },
        "solar_impact": {
            "score": impact.score,
            "rating": impact.rating.value,
            "insight": insight(
                impact,
                cloud_cover=values["cloud_cover"],
                precipitation=values["precipitation"],
                temperature=values["temperature"],
                wind_speed=values["wind_speed"],
                irradiance=values["solar_irradiance"],
            ),
            "breakdown": asdict(impact.breakdown),
        },
        "location": {
            "city": city or "Unknown",
            "latitude": latitude,
            "longitude": longitude,
        },
        "timestamp": utcnow().isoformat(),
    }


class WeatherService:
    def __init__(self, units: Optional[UnitStore] = None, connector: Optional[OpenMeteoConnector] = None) -> None:
        self.units = units or SqlUnitStore()
        self.connector = connector or OpenMeteoConnector(settings.weather_api_url, timeout=settings.weather_timeout)

    async def current_for_unit(self, unit_id: str) -> Dict[str, Any]:
        unit = await asyncio.to_thread(self.units.find_unit, unit_id)
        if unit is None:
            raise NotFoundError(f"solar unit {unit_id} not found")
        loc = unit.location
        if loc is None:
            raise NotFoundError(f"solar unit {unit_id} has no location data")

        cached = await weather_cache.load(loc.latitude, loc.longitude)
        if cached is not None:
            log.debug("Weather cache hit for unit %s", unit_id)
            return {
                **cached,
                "location": {"city": loc.city or "Unknown", "latitude": loc.latitude, "longitude": loc.longitude},
            }

        current = await self.connector.current(loc.latitude, loc.longitude)
        report = build_report(current, loc.latitude, loc.longitude, loc.city)
        await weather_cache.save(loc.latitude, loc.longitude, report)
        return report


weather_service = WeatherService()

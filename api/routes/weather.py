"""
Current weather and solar impact for a unit's location.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.responses import CurrentWeatherOut
from api.routes.exception import handle_exceptions
from services.weather_service import weather_service

router = APIRouter(tags=["Weather"])


@router.get("/weather/current/{unit_id}", response_model=CurrentWeatherOut)
@handle_exceptions
async def current_weather(unit_id: str) -> CurrentWeatherOut:
    return CurrentWeatherOut.model_validate(await weather_service.current_for_unit(unit_id))

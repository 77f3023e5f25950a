from __future__ import annotations

import logging
from typing import Optional

from config import WEATHER_TTL
from store import keys
from store.client import get_json, set_json

log = logging.getLogger(__name__)


async def load(latitude: float, longitude: float) -> Optional[dict]:
    try:
        data = await get_json(keys.weather(latitude, longitude))
    except Exception as exc:
        log.debug("Weather cache load failed %.2f,%.2f: %s", latitude, longitude, exc)
        return None
    return data if isinstance(data, dict) else None


async def save(latitude: float, longitude: float, payload: dict) -> None:
    try:
        await set_json(keys.weather(latitude, longitude), payload, ttl=WEATHER_TTL)
    except Exception as exc:
        log.debug("Weather cache save failed %.2f,%.2f: %s", latitude, longitude, exc)

from __future__ import annotations

import logging
from typing import Optional

from config import LAST_RUN_TTL
from store import keys
from store.client import get_json, set_json

log = logging.getLogger(__name__)


async def load_last_run() -> Optional[dict]:
    try:
        data = await get_json(keys.last_run())
    except Exception as exc:
        log.debug("Last run load failed: %s", exc)
        return None
    return data if isinstance(data, dict) else None


async def save_last_run(summary: dict) -> None:
    try:
        await set_json(keys.last_run(), summary, ttl=LAST_RUN_TTL)
    except Exception as exc:
        log.debug("Last run save failed: %s", exc)

"""
Test Suite for Store Client

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from store import runs, weather
from store.client import _fallback, get_json, redis_delete, redis_get, redis_set, set_json


@pytest.mark.asyncio
async def test_fallback_operations():
    await redis_set("k1", "v1")
    assert await redis_get("k1") == "v1"
    await redis_delete("k1")
    assert await redis_get("k1") is None


@pytest.mark.asyncio
async def test_fallback_honours_ttl():
    await redis_set("short", "x", ttl=10)
    await redis_set("forever", "y")
    assert await redis_get("short") == "x"
    value, expires_at = _fallback["short"]
    assert expires_at is not None and _fallback["forever"][1] is None
    _fallback["short"] = (value, expires_at - 11)
    assert await redis_get("short") is None
    assert "short" not in _fallback


@pytest.mark.asyncio
async def test_json_helpers_roundtrip_and_discard_garbage():
    await set_json("doc", {"a": 1})
    assert await get_json("doc") == {"a": 1}
    await redis_set("bad", "{not json")
    assert await get_json("bad") is None


@pytest.mark.asyncio
async def test_last_run_and_weather_cache():
    assert await runs.load_last_run() is None
    await runs.save_last_run({"units_processed": 3})
    assert (await runs.load_last_run())["units_processed"] == 3

    await weather.save(52.5201, 13.4049, {"current": {"cloud_cover": 10}})
    assert await weather.load(52.52, 13.40) == {"current": {"cloud_cover": 10}}
    assert await weather.load(48.85, 2.35) is None

#!/usr/bin/env python3

"""
Command-line runner for SolarWatch: one in-process detection pass, or a smoke
pass over a running API.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx

BASE_URL = os.getenv("SOLARWATCH_BASE_URL", "http://localhost:4322/api/v1")
HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class Case:
    label: str
    method: str
    path: str
    body: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    expect: int = 200
    section: str = ""


def cases_for(unit_id: str) -> list:
    return [
        Case("health", "GET", "/health", section="Health"),
        Case("detection status", "GET", "/detection/status", section="Detection"),
        Case("trigger run", "POST", "/detection/run", section="Detection"),
        Case("weather performance", "GET", f"/analytics/weather-performance/{unit_id}",
             params={"days": 7}, section="Analytics"),
        Case("anomaly distribution", "GET", f"/analytics/anomaly-distribution/{unit_id}",
             params={"days": 30}, section="Analytics"),
        Case("system health", "GET", f"/analytics/system-health/{unit_id}",
             params={"days": 7}, section="Analytics"),
        Case("findings page", "GET", "/findings", params={"unit_id": unit_id, "limit": 10}, section="Findings"),
        Case("findings stats", "GET", "/findings/stats", section="Findings"),
        Case("unknown unit", "GET", "/analytics/system-health/does-not-exist",
             expect=404, section="Validation"),
        Case("days out of range", "GET", f"/analytics/weather-performance/{unit_id}",
             params={"days": 31}, expect=422, section="Validation"),
        Case("limit out of range", "GET", "/findings", params={"limit": 500}, expect=422, section="Validation"),
    ]


async def run_case(client: httpx.AsyncClient, case: Case) -> tuple:
    try:
        r = await client.request(case.method, case.path, json=case.body or None, params=case.params)
    except httpx.TransportError as exc:
        return False, f"transport error: {exc}", None
    try:
        body: Any = r.json()
    except ValueError:
        body = r.text
    if r.status_code == case.expect:
        return True, "", body
    return False, f"{r.status_code} {r.reason_phrase}", body


async def smoke(unit_id: str) -> int:
    passed = failed = 0
    current_section = ""
    async with httpx.AsyncClient(base_url=BASE_URL, headers=HEADERS, timeout=60) as client:
        for case in cases_for(unit_id):
            if case.section != current_section:
                current_section = case.section
                print(f"\n-- {current_section}")
            ok, detail, body = await run_case(client, case)
            if ok:
                passed += 1
                print(f"  PASS  {case.method} {case.path} ({case.label})")
            else:
                failed += 1
                print(f"  FAIL  {case.method} {case.path} ({case.label}), expected {case.expect}: {detail}")
                print(json.dumps(body, indent=2, default=str))
    print(f"\nResults: {passed} passed / {failed} failed / {passed + failed} total")
    return 0 if failed == 0 else 1


async def detect_once() -> int:
    from config import settings
    from database import dispose_database, init_database, init_db
    from engine.exceptions import DetectionRunError
    from services.detection_service import detection_service

    init_database(settings.database_url)
    init_db()
    try:
        summary = await detection_service.trigger()
    except DetectionRunError as exc:
        print(f"detection run failed: {exc}", file=sys.stderr)
        return 2
    finally:
        dispose_database()
    print(json.dumps(summary.to_dict(), indent=2))
    return 0 if not summary.failed_units else 1


async def main() -> int:
    parser = argparse.ArgumentParser(description="SolarWatch runner")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("detect", help="run one detection pass against the configured database")
    smoke_parser = sub.add_parser("smoke", help="exercise a running API")
    smoke_parser.add_argument("--unit", required=True, help="unit id used by the per-unit cases")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    if args.command == "detect":
        return await detect_once()
    return await smoke(args.unit)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

"""
Manual detection trigger and run status.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.responses import DetectionRunOut, DetectionStatusOut
from api.routes.exception import handle_exceptions
from services.detection_service import detection_service

router = APIRouter(tags=["Detection"])


@router.post("/detection/run", response_model=DetectionRunOut, summary="Run detection over all active units now")
@handle_exceptions
async def run_detection() -> DetectionRunOut:
    summary = await detection_service.trigger()
    return DetectionRunOut.model_validate(summary)


@router.get("/detection/status", response_model=DetectionStatusOut, summary="Last run summary and fleet counters")
@handle_exceptions
async def detection_status() -> DetectionStatusOut:
    return DetectionStatusOut.model_validate(await detection_service.status())

"""
Routes initialization for API endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health import router as health_router
from api.routes.detection import router as detection_router
from api.routes.analytics import router as analytics_router
from api.routes.findings import router as findings_router
from api.routes.weather import router as weather_router

router = APIRouter()

router.include_router(health_router)
router.include_router(detection_router)
router.include_router(analytics_router)
router.include_router(findings_router)
router.include_router(weather_router)

__all__ = ["router"]

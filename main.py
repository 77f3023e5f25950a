"""
Entry point for the SolarWatch API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from api.routes import router
from config import settings
from database import connection_test, dispose_database, init_database, init_db
from services.detection_service import detection_service
from services.scheduler import DetectionScheduler

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)

_database_ready = False
_scheduler: Optional[DetectionScheduler] = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    global _database_ready, _scheduler

    init_database(settings.database_url)
    init_db()
    _database_ready = await asyncio.to_thread(connection_test)
    if not _database_ready:
        log.warning("Database not reachable at startup, detection runs will fail until it recovers")

    if settings.detection_scheduler_enabled:
        _scheduler = DetectionScheduler(detection_service.trigger, settings.detection_interval_seconds)
        _scheduler.start()
    try:
        yield
    finally:
        if _scheduler is not None:
            await _scheduler.stop()
            _scheduler = None
        dispose_database()
        _database_ready = False


app = FastAPI(
    title="SolarWatch",
    description="Rule-based anomaly detection and derived analytics for solar energy telemetry.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


@app.get("/api/v1/ready", tags=["health"], summary="Readiness probe")
async def ready() -> JSONResponse:
    components: Dict[str, str] = {
        "database": "ready" if _database_ready else "unavailable",
        "scheduler": "running" if _scheduler is not None and _scheduler.running else "stopped",
    }
    code = 200 if _database_ready else 503
    return JSONResponse(
        status_code=code,
        content={"ready": _database_ready, "components": components},
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=4322,
        log_level="info",
        access_log=True,
    )

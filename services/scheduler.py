"""
Periodic trigger for detection runs with an explicit start/stop lifecycle.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Optional

from config import settings

log = logging.getLogger(__name__)


class DetectionScheduler:
    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        interval_seconds: Optional[float] = None,
        run_on_start: bool = False,
    ) -> None:
        self._job = job
        self._interval = float(interval_seconds or settings.detection_interval_seconds)
        self._run_on_start = run_on_start
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        log.info("Detection scheduler started, interval %.0fs", self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        log.info("Detection scheduler stopped")

    async def run_once(self) -> Any:
        if self._lock.locked():
            log.info("Detection run already in progress, skipping tick")
            return None
        async with self._lock:
            try:
                return await self._job()
            except asyncio.CancelledError:
                raise
            except Exception:
                log.exception("Scheduled detection run failed")
                return None

    async def _loop(self) -> None:
        if self._run_on_start:
            await self.run_once()
        while True:
            await asyncio.sleep(self._interval)
            await self.run_once()

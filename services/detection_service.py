"""
Detection service wiring the orchestrator to the SQL stores and the run cache.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from engine.enums import UnitStatus
from engine.exceptions import DetectionRunError
from engine.orchestrator import DetectionOrchestrator, DetectionRunSummary
from store import runs
from store.base import FindingStore, ReadingStore, UnitStore
from store.findings import SqlFindingStore
from store.readings import SqlReadingStore
from store.units import SqlUnitStore

log = logging.getLogger(__name__)


class DetectionService:
    def __init__(
        self,
        units: Optional[UnitStore] = None,
        readings: Optional[ReadingStore] = None,
        findings: Optional[FindingStore] = None,
    ) -> None:
        self.units = units or SqlUnitStore()
        self.readings = readings or SqlReadingStore()
        self.findings = findings or SqlFindingStore()
        self.orchestrator = DetectionOrchestrator(self.units, self.readings, self.findings)

    async def trigger(self) -> DetectionRunSummary:
        try:
            summary = await self.orchestrator.run_for_all_active_units()
        except DetectionRunError as exc:
            if exc.summary is not None:
                await runs.save_last_run({**exc.summary.to_dict(), "error": str(exc)})
            raise
        await runs.save_last_run(summary.to_dict())
        return summary

    async def status(self) -> Dict[str, Any]:
        active, total_readings = await asyncio.gather(
            asyncio.to_thread(self.units.count_units, UnitStatus.ACTIVE),
            asyncio.to_thread(self.readings.count_readings),
        )
        return {
            "last_run": await runs.load_last_run(),
            "active_units": active,
            "total_readings": total_readings,
        }


detection_service = DetectionService()

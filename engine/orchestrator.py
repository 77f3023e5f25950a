"""
Detection run across all active units: one shared reading window per unit, every
algorithm over it, findings recorded through the deduplicating recorder.

Units are scanned in worker threads under a bounded semaphore. A failing unit is
logged and reported without affecting its siblings. Once the run's wall-clock
budget is spent no further units are started; units already running finish
their writes.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from config import settings
from engine.detection import DETECTORS
from engine.exceptions import DetectionRunError, PartialRecordError
from engine.models import Finding, Unit, as_utc, utcnow
from engine.recorder import FindingRecorder
from engine.window import ReadingWindow, load_window
from store.base import FindingStore, ReadingStore, UnitStore

log = logging.getLogger(__name__)

Detector = Callable[[Unit, ReadingWindow], List[Finding]]


@dataclass(frozen=True)
class UnitOutcome:
    unit_id: str
    status: str  # "ok" | "failed" | "skipped"
    detected: int = 0
    saved: int = 0


@dataclass(frozen=True)
class DetectionRunSummary:
    started_at: datetime
    finished_at: datetime
    units_processed: int = 0
    findings_detected: int = 0
    findings_saved: int = 0
    failed_units: Tuple[str, ...] = field(default_factory=tuple)
    skipped_units: int = 0

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["finished_at"] = self.finished_at.isoformat()
        data["failed_units"] = list(self.failed_units)
        data["duration_seconds"] = round(self.duration_seconds, 3)
        return data

    @classmethod
    def from_outcomes(cls, started_at: datetime, outcomes: Sequence[UnitOutcome]) -> DetectionRunSummary:
        ok = [o for o in outcomes if o.status == "ok"]
        return cls(
            started_at=started_at,
            finished_at=utcnow(),
            units_processed=len(ok),
            findings_detected=sum(o.detected for o in ok),
            findings_saved=sum(o.saved for o in outcomes),
            failed_units=tuple(o.unit_id for o in outcomes if o.status == "failed"),
            skipped_units=sum(1 for o in outcomes if o.status == "skipped"),
        )


class DetectionOrchestrator:
    def __init__(
        self,
        units: UnitStore,
        readings: ReadingStore,
        findings: FindingStore,
        *,
        detectors: Sequence[Detector] = DETECTORS,
        lookback_days: Optional[int] = None,
        max_parallel: Optional[int] = None,
        budget_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._units = units
        self._readings = readings
        self._recorder = FindingRecorder(findings)
        self._detectors = tuple(detectors)
        self._lookback_days = lookback_days or settings.detection_lookback_days
        self._max_parallel = max(1, int(max_parallel or settings.detection_max_parallel_units))
        self._budget_seconds = settings.detection_run_budget_seconds if budget_seconds is None else budget_seconds
        self._clock = clock

    def scan_unit(self, unit: Unit, window: ReadingWindow) -> List[Finding]:
        found: List[Finding] = []
        for detector in self._detectors:
            found.extend(detector(unit, window))
        return found

    def process_unit(self, unit: Unit, now: datetime) -> UnitOutcome:
        window = load_window(self._readings, unit.id, self._lookback_days, now)
        found = self.scan_unit(unit, window)
        saved = self._recorder.record(found)
        log.info(
            "Unit %s: %d readings, %d findings detected, %d saved",
            unit.id, len(window), len(found), saved,
        )
        return UnitOutcome(unit_id=unit.id, status="ok", detected=len(found), saved=saved)

    async def run_for_all_active_units(
        self,
        now: Optional[datetime] = None,
        deadline: Optional[float] = None,
    ) -> DetectionRunSummary:
        """deadline is a value of the orchestrator clock (time.monotonic by default)."""
        started_at = utcnow()
        now = as_utc(now) if now is not None else started_at
        if deadline is None:
            deadline = self._clock() + self._budget_seconds
        log.info("Detection run started at %s", started_at.isoformat())

        try:
            units = await asyncio.to_thread(self._units.find_active_units)
        except Exception as exc:
            log.exception("Detection run aborted: could not list active units")
            raise DetectionRunError(
                f"could not list active units: {exc}",
                summary=DetectionRunSummary.from_outcomes(started_at, ()),
            ) from exc

        semaphore = asyncio.Semaphore(self._max_parallel)

        async def _guarded(unit: Unit) -> UnitOutcome:
            async with semaphore:
                if self._clock() >= deadline:
                    log.warning("Run budget exhausted, skipping unit %s", unit.id)
                    return UnitOutcome(unit_id=unit.id, status="skipped")
                try:
                    return await asyncio.to_thread(self.process_unit, unit, now)
                except PartialRecordError as exc:
                    log.exception("Detection failed for unit %s after %d findings were saved", unit.id, exc.saved)
                    return UnitOutcome(unit_id=unit.id, status="failed", saved=exc.saved)
                except Exception:
                    log.exception("Detection failed for unit %s", unit.id)
                    return UnitOutcome(unit_id=unit.id, status="failed")

        outcomes = await asyncio.gather(*(_guarded(u) for u in units))
        summary = DetectionRunSummary.from_outcomes(started_at, outcomes)
        log.info(
            "Detection run finished: %d/%d units processed, %d detected, %d saved, %d failed, %d skipped (%.2fs)",
            summary.units_processed, len(units), summary.findings_detected, summary.findings_saved,
            len(summary.failed_units), summary.skipped_units, summary.duration_seconds,
        )
        return summary

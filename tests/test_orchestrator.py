"""
Test Suite for the detection orchestrator

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
import json
import threading

import pytest

from engine.enums import FindingType, UnitStatus
from engine.exceptions import DetectionRunError, StoreUnavailable
from engine.orchestrator import DetectionOrchestrator
from engine.window import ReadingWindow
from fakes import InMemoryFindingStore, InMemoryReadingStore, InMemoryUnitStore, at, reading, unit

NOW = at(2, 23)


def _readings():
    return [
        # u1: one nighttime spike, one frozen streak
        reading(at(1, 21), 80, unit_id="u1"),
        *[reading(at(2, h), 333, unit_id="u1") for h in (8, 10, 12, 14)],
        # u2: a peak-hour zero
        reading(at(2, 12), 0, unit_id="u2"),
        # inactive unit data is never scanned
        reading(at(2, 22), 500, unit_id="u9"),
    ]


def _orchestrator(readings=None, units=None, findings=None, **kwargs):
    units = units or InMemoryUnitStore([
        unit("u1"), unit("u2"), unit("u9", status=UnitStatus.INACTIVE),
    ])
    readings = readings or InMemoryReadingStore(_readings())
    findings = findings if findings is not None else InMemoryFindingStore()
    return DetectionOrchestrator(units, readings, findings, **kwargs), findings


@pytest.mark.asyncio
async def test_run_processes_active_units_and_saves():
    orch, findings = _orchestrator()
    summary = await orch.run_for_all_active_units(now=NOW)
    assert summary.units_processed == 2
    assert summary.findings_detected == 3
    assert summary.findings_saved == 3
    assert summary.failed_units == ()
    types = sorted(f.type.value for f in findings.findings)
    assert types == sorted([
        FindingType.NIGHTTIME_GENERATION.value,
        FindingType.FROZEN_GENERATION.value,
        FindingType.ZERO_GENERATION_CLEAR_SKY.value,
    ])
    assert all(f.unit_id != "u9" for f in findings.findings)


@pytest.mark.asyncio
async def test_second_run_on_unchanged_data_saves_nothing():
    orch, findings = _orchestrator()
    await orch.run_for_all_active_units(now=NOW)
    again = await orch.run_for_all_active_units(now=NOW)
    assert again.findings_detected == 3
    assert again.findings_saved == 0
    assert len(findings.findings) == 3


@pytest.mark.asyncio
async def test_failing_unit_is_isolated():
    class FlakyReadings(InMemoryReadingStore):
        def find_readings(self, unit_id, since=None, until=None):
            if unit_id == "u1":
                raise StoreUnavailable("boom")
            return super().find_readings(unit_id, since, until)

    orch, findings = _orchestrator(readings=FlakyReadings(_readings()))
    summary = await orch.run_for_all_active_units(now=NOW)
    assert summary.failed_units == ("u1",)
    assert summary.units_processed == 1
    assert summary.findings_saved == 1
    assert [f.unit_id for f in findings.findings] == ["u2"]


@pytest.mark.asyncio
async def test_listing_units_failure_raises_with_partial_summary():
    class BrokenUnits(InMemoryUnitStore):
        def find_active_units(self):
            raise StoreUnavailable("db down")

    orch, _ = _orchestrator(units=BrokenUnits())
    with pytest.raises(DetectionRunError) as excinfo:
        await orch.run_for_all_active_units(now=NOW)
    assert excinfo.value.summary is not None
    assert excinfo.value.summary.units_processed == 0


@pytest.mark.asyncio
async def test_exhausted_budget_skips_remaining_units():
    orch, findings = _orchestrator(max_parallel=1)
    summary = await orch.run_for_all_active_units(now=NOW, deadline=float("-inf"))
    assert summary.units_processed == 0
    assert summary.skipped_units == 2
    assert findings.findings == []


def test_scan_unit_is_pure():
    orch, findings = _orchestrator()
    window = ReadingWindow([r for r in _readings() if r.unit_id == "u1"])
    first = orch.scan_unit(unit("u1"), window)
    second = orch.scan_unit(unit("u1"), window)
    assert [f.type for f in first] == [f.type for f in second]
    assert findings.findings == []


@pytest.mark.asyncio
async def test_summary_to_dict_is_json_ready():
    orch, _ = _orchestrator()
    summary = await orch.run_for_all_active_units(now=NOW)
    data = summary.to_dict()
    json.dumps(data)
    assert data["units_processed"] == 2
    assert data["duration_seconds"] >= 0


@pytest.mark.asyncio
async def test_three_units_with_middle_store_failure():
    class FailingForB(InMemoryReadingStore):
        def find_readings(self, unit_id, since=None, until=None):
            if unit_id == "B":
                raise StoreUnavailable("read timeout")
            return super().find_readings(unit_id, since, until)

    readings = FailingForB([
        reading(at(2, 21), 50, unit_id="A"),
        reading(at(2, 21), 50, unit_id="B"),
        reading(at(2, 12), 0, unit_id="C"),
    ])
    orch, findings = _orchestrator(
        readings=readings,
        units=InMemoryUnitStore([unit("A"), unit("B"), unit("C")]),
    )
    summary = await orch.run_for_all_active_units(now=NOW)
    assert summary.units_processed == 2
    assert summary.findings_saved == 2
    assert summary.failed_units == ("B",)
    assert sorted(f.unit_id for f in findings.findings) == ["A", "C"]


@pytest.mark.asyncio
async def test_partial_write_failure_counts_saved_findings():
    class FailsOnSecondU1Insert(InMemoryFindingStore):
        def insert(self, f):
            if f.unit_id == "u1" and any(s.unit_id == "u1" for s in self.findings):
                raise StoreUnavailable("write failed")
            return super().insert(f)

    orch, findings = _orchestrator(findings=FailsOnSecondU1Insert())
    summary = await orch.run_for_all_active_units(now=NOW)
    assert summary.failed_units == ("u1",)
    assert summary.units_processed == 1
    assert summary.findings_saved == 2
    assert sorted(f.unit_id for f in findings.findings) == ["u1", "u2"]


def _four_night_units():
    ids = ["A", "B", "C", "D"]
    return ids, [reading(at(2, 21), 50, unit_id=uid) for uid in ids]


@pytest.mark.asyncio
async def test_cancelled_run_lets_running_unit_finish_writes():
    class BlockingReadings(InMemoryReadingStore):
        def __init__(self, readings):
            super().__init__(readings)
            self.scanned = []
            self.entered = threading.Event()
            self.release = threading.Event()

        def find_readings(self, unit_id, since=None, until=None):
            self.scanned.append(unit_id)
            if unit_id == "A":
                self.entered.set()
                self.release.wait(5)
            return super().find_readings(unit_id, since, until)

    class SignallingFindings(InMemoryFindingStore):
        def __init__(self):
            super().__init__()
            self.inserted = threading.Event()

        def insert(self, f):
            out = super().insert(f)
            self.inserted.set()
            return out

    ids, rows = _four_night_units()
    readings = BlockingReadings(rows)
    orch, findings = _orchestrator(
        readings=readings,
        units=InMemoryUnitStore([unit(uid) for uid in ids]),
        findings=SignallingFindings(),
        max_parallel=1,
    )

    task = asyncio.create_task(orch.run_for_all_active_units(now=NOW))
    assert await asyncio.to_thread(readings.entered.wait, 5)
    task.cancel()
    readings.release.set()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert await asyncio.to_thread(findings.inserted.wait, 5)
    assert [f.unit_id for f in findings.findings] == ["A"]
    assert readings.scanned == ["A"]


@pytest.mark.asyncio
async def test_budget_running_out_mid_run_skips_later_units():
    clock = {"now": 0.0}

    class AdvancingReadings(InMemoryReadingStore):
        def find_readings(self, unit_id, since=None, until=None):
            if unit_id == "A":
                clock["now"] = 100.0
            return super().find_readings(unit_id, since, until)

    ids, rows = _four_night_units()
    orch, findings = _orchestrator(
        readings=AdvancingReadings(rows[:3]),
        units=InMemoryUnitStore([unit(uid) for uid in ids[:3]]),
        max_parallel=1,
        budget_seconds=10.0,
        clock=lambda: clock["now"],
    )
    summary = await orch.run_for_all_active_units(now=NOW)
    assert summary.units_processed == 1
    assert summary.skipped_units == 2
    assert summary.findings_saved == 1
    assert [f.unit_id for f in findings.findings] == ["A"]

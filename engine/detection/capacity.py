"""
Capacity exceeded: a reading reports more energy than the unit's nameplate
capacity could physically deliver over the reading interval.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List

from engine.enums import FindingType
from engine.models import AffectedPeriod, Finding, FindingMetadata, Unit
from engine.rounding import round_half_up
from engine.window import ReadingWindow

TYPE = FindingType.ENERGY_EXCEEDING_THRESHOLD


def detect(unit: Unit, window: ReadingWindow) -> List[Finding]:
    if unit.capacity_w <= 0:
        return []

    out: List[Finding] = []
    for r in window.newest_first():
        max_wh = unit.capacity_w * r.interval_hours
        if r.energy_wh <= max_wh:
            continue
        deviation = round_half_up((r.energy_wh - max_wh) / max_wh * 100)
        out.append(Finding(
            unit_id=unit.id,
            type=TYPE,
            severity=TYPE.default_severity,
            affected_period=AffectedPeriod(start=r.timestamp, end=r.timestamp),
            reading_ids=(r.id,),
            description=(
                f"Reported {r.energy_wh:g}Wh exceeds the physical maximum of {max_wh:g}Wh "
                f"for a {unit.capacity_w:g}W unit over {r.interval_hours:g}h ({deviation}% over). "
                "Likely a metering or unit-conversion error."
            ),
            metadata=FindingMetadata(
                expected_value=max_wh,
                actual_value=r.energy_wh,
                deviation=float(deviation),
                threshold=f"capacity {unit.capacity_w:g}W x interval {r.interval_hours:g}h = {max_wh:g}Wh",
            ),
        ))
    return out

"""
Zero generation during peak sun hours. Weather data is not consulted.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List

from config import settings
from engine.detection.hours import fmt_hour, is_peak
from engine.enums import FindingType
from engine.models import AffectedPeriod, Finding, FindingMetadata, Unit
from engine.window import ReadingWindow

TYPE = FindingType.ZERO_GENERATION_CLEAR_SKY


def detect(unit: Unit, window: ReadingWindow) -> List[Finding]:
    baseline = settings.peak_min_baseline_wh
    threshold = (
        f"Peak hours: {fmt_hour(settings.peak_start_hour)}-{fmt_hour(settings.peak_end_hour)}, "
        f"expected at least {baseline:g} Wh"
    )
    out: List[Finding] = []
    for r in window.newest_first():
        if not is_peak(r.hour) or r.energy_wh != 0:
            continue
        out.append(Finding(
            unit_id=unit.id,
            type=TYPE,
            severity=TYPE.default_severity,
            affected_period=AffectedPeriod(start=r.timestamp, end=r.timestamp),
            reading_ids=(r.id,),
            description=(
                f"Solar panel reported 0Wh at {fmt_hour(r.hour)} during peak sun hours. "
                "Possible inverter failure, disconnection or a stuck sensor."
            ),
            metadata=FindingMetadata(
                expected_value=baseline,
                actual_value=0.0,
                deviation=100.0,
                threshold=threshold,
            ),
        ))
    return out

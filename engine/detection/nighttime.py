"""
Nighttime generation: panels reporting measurable output between dusk and dawn.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List

from config import settings
from engine.detection.hours import fmt_hour, is_night
from engine.enums import FindingType
from engine.models import AffectedPeriod, Finding, FindingMetadata, Unit
from engine.window import ReadingWindow

TYPE = FindingType.NIGHTTIME_GENERATION


def detect(unit: Unit, window: ReadingWindow) -> List[Finding]:
    threshold = (
        f"Night hours: {fmt_hour(settings.night_start_hour)}-{fmt_hour(settings.night_end_hour)}, "
        f"expected 0 Wh (tolerance {settings.nighttime_max_energy_wh:g} Wh)"
    )
    out: List[Finding] = []
    for r in window.newest_first():
        if not is_night(r.hour) or r.energy_wh <= settings.nighttime_max_energy_wh:
            continue
        out.append(Finding(
            unit_id=unit.id,
            type=TYPE,
            severity=TYPE.default_severity,
            affected_period=AffectedPeriod(start=r.timestamp, end=r.timestamp),
            reading_ids=(r.id,),
            description=(
                f"Solar panel generated {r.energy_wh:g}Wh at {fmt_hour(r.hour)} (night hours). "
                "This indicates a sensor malfunction or data error."
            ),
            metadata=FindingMetadata(
                expected_value=0.0,
                actual_value=r.energy_wh,
                deviation=100.0,
                threshold=threshold,
            ),
        ))
    return out

"""
Frozen generation: a run of consecutive readings reporting the identical energy
value, the signature of a stuck sensor or a broken ingestion link.

The scan is a single fold over the ascending readings; the accumulator holds
the finished streaks and the streak currently being extended.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from functools import reduce
from typing import List, Sequence, Tuple

from config import settings
from engine.detection.hours import is_night
from engine.enums import FindingType
from engine.models import AffectedPeriod, Finding, FindingMetadata, Reading, Unit
from engine.window import ReadingWindow

TYPE = FindingType.FROZEN_GENERATION

Streak = Tuple[Reading, ...]
_State = Tuple[Tuple[Streak, ...], Streak]


def _step(state: _State, reading: Reading) -> _State:
    done, current = state
    if current and current[-1].energy_wh == reading.energy_wh:
        return done, current + (reading,)
    if current:
        done = done + (current,)
    return done, (reading,)


def streaks(readings: Sequence[Reading]) -> Tuple[Streak, ...]:
    done, current = reduce(_step, readings, ((), ()))
    return done + (current,) if current else done


def _is_night_idle(streak: Streak) -> bool:
    return all(is_night(r.hour) and r.energy_wh == 0 for r in streak)


def weather_changed(streak: Streak) -> bool:
    conditions = {r.weather.condition for r in streak if r.weather and r.weather.condition is not None}
    clouds = {r.weather.cloud_cover for r in streak if r.weather and r.weather.cloud_cover is not None}
    return len(conditions) > 1 or len(clouds) > 1


def _finding(unit: Unit, streak: Streak) -> Finding:
    first, last = streak[0], streak[-1]
    value = first.energy_wh
    changed = weather_changed(streak)
    if changed:
        description = (
            f"Energy output stayed at exactly {value:g}Wh for {len(streak)} consecutive readings "
            "while the recorded weather changed. The sensor is very likely frozen."
        )
    else:
        description = (
            f"Energy output stayed at exactly {value:g}Wh for {len(streak)} consecutive readings. "
            "The sensor or data feed may be frozen."
        )
    return Finding(
        unit_id=unit.id,
        type=TYPE,
        severity=TYPE.default_severity,
        affected_period=AffectedPeriod(start=first.timestamp, end=last.timestamp),
        reading_ids=tuple(r.id for r in streak),
        description=description,
        metadata=FindingMetadata(
            actual_value=value,
            deviation=float(
                settings.frozen_deviation_weather_changed if changed else settings.frozen_deviation_weather_static
            ),
            threshold=f"{settings.frozen_min_streak}+ consecutive identical readings",
            streak_length=len(streak),
            weather_changed=changed,
        ),
    )


def detect(unit: Unit, window: ReadingWindow) -> List[Finding]:
    return [
        _finding(unit, s)
        for s in streaks(window.as_tuple())
        if len(s) >= settings.frozen_min_streak and not _is_night_idle(s)
    ]

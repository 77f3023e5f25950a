"""
Per-unit reading window shared by every detection algorithm in a run.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional, Sequence

from engine.exceptions import ValidationError
from engine.models import Reading, as_utc, utcnow


class ReadingWindow:
    """Immutable, restartable sequence of readings ordered oldest first."""

    __slots__ = ("_readings", "since", "until")

    def __init__(self, readings: Iterable[Reading], since: Optional[datetime] = None, until: Optional[datetime] = None):
        self._readings: tuple[Reading, ...] = tuple(sorted(readings, key=lambda r: (r.timestamp, r.id)))
        self.since = since
        self.until = until

    def __iter__(self) -> Iterator[Reading]:
        return iter(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def __bool__(self) -> bool:
        return bool(self._readings)

    def __getitem__(self, idx: int) -> Reading:
        return self._readings[idx]

    def newest_first(self) -> Iterator[Reading]:
        return reversed(self._readings)

    def as_tuple(self) -> Sequence[Reading]:
        return self._readings


def load_window(store, unit_id: str, days: int, now: Optional[datetime] = None) -> ReadingWindow:
    if days is None or days <= 0:
        raise ValidationError(f"window days must be > 0, got {days}")
    now = as_utc(now) if now is not None else utcnow()
    since = now - timedelta(days=days)
    return ReadingWindow(store.find_readings(unit_id, since=since), since=since, until=now)

"""
Rule-based detection algorithms. Each exposes detect(unit, window) -> List[Finding]
and is independent of the others.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.detection import capacity, frozen, nighttime, weather_mismatch, zero_generation

DETECTORS = (
    nighttime.detect,
    zero_generation.detect,
    capacity.detect,
    weather_mismatch.detect,
    frozen.detect,
)

__all__ = ["DETECTORS", "capacity", "frozen", "nighttime", "weather_mismatch", "zero_generation"]

"""
Half-up rounding used for every reported percentage, ratio and score.

Python's round() uses banker's rounding (round(2.5) == 2); reported figures
round ties towards +inf instead (2.5 -> 3, -2.5 -> -2).

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 2) -> float:
    scale = 10 ** digits
    # absorbs binary artefacts such as 1.005 * 100 == 100.49999...
    return math.floor(value * scale + 0.5 + 1e-9) / scale


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))

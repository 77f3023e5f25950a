"""
Cache key builders.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations


def last_run() -> str:
    return "sw:detection:last_run"


def weather(latitude: float, longitude: float) -> str:
    # ~1 km grid so neighbouring units share one upstream call
    return f"sw:weather:{latitude:.2f}:{longitude:.2f}"

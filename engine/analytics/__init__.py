"""
Derived analytics: weather-adjusted performance, anomaly distribution and system health.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.analytics.distribution import AnomalyDistribution
from engine.analytics.engine import AnalyticsEngine
from engine.analytics.health import SystemHealth
from engine.analytics.performance import WeatherAdjustedPerformance

__all__ = ["AnalyticsEngine", "AnomalyDistribution", "SystemHealth", "WeatherAdjustedPerformance"]

"""
Constants and configuration for SolarWatch.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os

from pydantic import model_validator
from pydantic_settings import BaseSettings


REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
LAST_RUN_TTL: int = int(os.getenv("LAST_RUN_TTL", "604800"))
WEATHER_TTL: int = int(os.getenv("WEATHER_TTL", "600"))

SOLARWATCH_DATABASE_URL = os.getenv("SOLARWATCH_DATABASE_URL", "sqlite:///./solarwatch.db")
SOLARWATCH_WEATHER_API_URL = os.getenv(
    "SOLARWATCH_WEATHER_API_URL", "https://api.open-meteo.com/v1/forecast"
).rstrip("/")


class Settings(BaseSettings):
    database_url: str = SOLARWATCH_DATABASE_URL
    weather_api_url: str = SOLARWATCH_WEATHER_API_URL
    weather_timeout: float = 10.0

    # hour boundaries, all UTC; ranges are inclusive unless stated otherwise
    night_start_hour: int = 19       # night is hour >= start or hour < end
    night_end_hour: int = 6
    peak_start_hour: int = 10
    peak_end_hour: int = 14
    daytime_start_hour: int = 6
    daytime_end_hour: int = 18

    # detection thresholds (Wh unless noted)
    nighttime_max_energy_wh: float = 10.0
    peak_min_baseline_wh: float = 200.0
    bad_weather_max_energy_wh: float = 500.0
    overcast_cloud_cover_pct: float = 80.0
    clear_sky_cloud_cover_pct: float = 20.0
    clear_weather_min_energy_wh: float = 200.0
    frozen_min_streak: int = 4
    frozen_deviation_weather_changed: int = 100
    frozen_deviation_weather_static: int = 50

    # orchestrator
    detection_lookback_days: int = 30
    detection_interval_seconds: float = 6 * 3600.0
    detection_run_budget_seconds: float = 1800.0
    detection_max_parallel_units: int = 4
    detection_scheduler_enabled: bool = True

    # weather-adjusted performance
    peak_hours_equivalent: float = 5.5
    default_cloud_cover: float = 50.0
    default_precipitation: float = 0.0
    default_temperature: float = 25.0
    default_irradiance: float = 500.0
    default_wind_speed: float = 10.0

    # solar impact scoring
    impact_cloud_bands: list[tuple[float, int]] = [
        (20.0, 0),
        (50.0, -20),
        (80.0, -40),
    ]
    impact_cloud_overcast_penalty: int = -60
    impact_rain_penalty: int = -30
    impact_irradiance_excellent: float = 800.0
    impact_irradiance_excellent_boost: int = 20
    impact_irradiance_good: float = 600.0
    impact_irradiance_good_boost: int = 10
    impact_hot_temperature: float = 35.0
    impact_hot_penalty: int = -10
    impact_windy_speed: float = 15.0
    impact_wind_boost: int = 5
    impact_rating_excellent: int = 80
    impact_rating_moderate: int = 50

    # condition classification from raw weather values
    condition_overcast_cloud_cover: float = 80.0
    condition_partly_cloudy_cloud_cover: float = 20.0

    # system health; the four composite weights must sum to 1.0
    health_weight_anomaly: float = 0.3
    health_weight_performance: float = 0.4
    health_weight_uptime: float = 0.2
    health_weight_resolution: float = 0.1
    health_critical_penalty: float = 10.0
    health_warning_penalty: float = 5.0
    health_default_performance: float = 75.0
    health_resolution_penalty_per_day: float = 10.0
    health_rating_excellent: int = 85
    health_rating_good: int = 70
    health_rating_fair: int = 50
    health_low_performance: float = 70.0
    health_low_uptime: float = 80.0
    health_slow_resolution_hours: float = 48.0

    # accepted window lengths (days) per analytics operation
    performance_days_max: int = 30
    distribution_days_max: int = 90
    health_days_max: int = 30
    stats_recent_days: int = 7

    # finding queries
    findings_default_limit: int = 50
    findings_max_limit: int = 100

    store_redis_retry_cooldown_seconds: float = 10.0
    store_fallback_max_items: int = 10_000

    model_config = {
        "env_prefix": "SOLARWATCH_",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def _check_health_weights(self) -> "Settings":
        total = (
            self.health_weight_anomaly
            + self.health_weight_performance
            + self.health_weight_uptime
            + self.health_weight_resolution
        )
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"health weights must sum to 1.0, got {total:.3f}")
        return self


settings = Settings()

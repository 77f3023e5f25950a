from __future__ import annotations

from config import settings


def is_night(hour: int) -> bool:
    return hour >= settings.night_start_hour or hour < settings.night_end_hour


def is_peak(hour: int) -> bool:
    return settings.peak_start_hour <= hour <= settings.peak_end_hour


def is_daytime(hour: int) -> bool:
    return settings.daytime_start_hour <= hour <= settings.daytime_end_hour


def fmt_hour(hour: int) -> str:
    return f"{hour:02d}:00 UTC"

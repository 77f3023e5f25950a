"""
System health score: a weighted composite of anomaly load, weather-adjusted
performance, uptime and resolution speed, with operator recommendations.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config import settings
from engine.enums import FindingStatus, HealthRating, Severity
from engine.models import Finding
from engine.rounding import clamp, round_half_up


@dataclass(frozen=True)
class HealthFactors:
    anomaly_impact: int
    performance_impact: int
    uptime_impact: int
    resolution_efficiency: int


@dataclass(frozen=True)
class SystemHealth:
    unit_id: str
    days: int
    health_score: int
    rating: HealthRating
    factors: HealthFactors
    recommendations: List[str] = field(default_factory=list)


def rating_for(score: float) -> HealthRating:
    if score >= settings.health_rating_excellent:
        return HealthRating.excellent
    if score >= settings.health_rating_good:
        return HealthRating.good
    if score >= settings.health_rating_fair:
        return HealthRating.fair
    return HealthRating.poor


def anomaly_score(critical: int, warning: int) -> float:
    return max(
        0.0,
        100.0 - settings.health_critical_penalty * critical - settings.health_warning_penalty * warning,
    )


def uptime_score(findings: Sequence[Finding], days: int) -> float:
    critical_days = {f.detected_at.date() for f in findings if f.severity is Severity.CRITICAL}
    return max(0.0, (days - len(critical_days)) / days * 100.0)


def mean_resolution_hours(findings: Sequence[Finding]) -> Optional[float]:
    durations = [
        (f.resolved_at - f.detected_at).total_seconds() / 3600.0
        for f in findings
        if f.status is FindingStatus.RESOLVED and f.resolved_at is not None
    ]
    if not durations:
        return None
    return sum(durations) / len(durations)


def resolution_score(mean_hours: Optional[float]) -> float:
    if mean_hours is None:
        return 100.0
    return max(0.0, 100.0 - mean_hours / 24.0 * settings.health_resolution_penalty_per_day)


def recommendations(critical: int, performance: float, uptime: float, mean_hours: Optional[float]) -> List[str]:
    out: List[str] = []
    if critical > 0:
        noun = "anomalies" if critical > 1 else "anomaly"
        out.append(f"Address {critical} critical {noun} immediately")
    if performance < settings.health_low_performance:
        out.append("Performance is below expectations, check for panel obstructions")
    if uptime < settings.health_low_uptime:
        out.append("System uptime is low, schedule maintenance")
    if mean_hours is not None and mean_hours > settings.health_slow_resolution_hours:
        out.append("Improve anomaly resolution time for better system health")
    if not out:
        out.append("System is operating optimally, continue monitoring")
    return out


def compute_health(
    unit_id: str,
    findings: Sequence[Finding],
    days: int,
    performance: Optional[float],
) -> SystemHealth:
    """performance is the average weather-adjusted ratio, or None when unavailable."""
    critical = sum(1 for f in findings if f.severity is Severity.CRITICAL)
    warning = sum(1 for f in findings if f.severity is Severity.WARNING)

    a = anomaly_score(critical, warning)
    p = clamp(settings.health_default_performance if performance is None else performance)
    u = uptime_score(findings, days)
    hours = mean_resolution_hours(findings)
    r = resolution_score(hours)

    score = int(clamp(round_half_up(
        settings.health_weight_anomaly * a
        + settings.health_weight_performance * p
        + settings.health_weight_uptime * u
        + settings.health_weight_resolution * r
    )))
    return SystemHealth(
        unit_id=unit_id,
        days=days,
        health_score=score,
        rating=rating_for(score),
        factors=HealthFactors(
            anomaly_impact=round_half_up(a),
            performance_impact=round_half_up(p),
            uptime_impact=round_half_up(u),
            resolution_efficiency=round_half_up(r),
        ),
        recommendations=recommendations(critical, p, u, hours),
    )

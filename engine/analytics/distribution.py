from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Type, Union

from engine.enums import FindingStatus, FindingType, GroupField, Severity
from engine.models import Finding
from engine.rounding import round_half_up

GroupKey = Union[FindingType, Severity, FindingStatus]

_GROUP_ENUMS: Dict[GroupField, Type[GroupKey]] = {
    GroupField.type: FindingType,
    GroupField.severity: Severity,
    GroupField.status: FindingStatus,
}


@dataclass(frozen=True)
class GroupShare:
    key: GroupKey
    count: int
    percentage: int


@dataclass(frozen=True)
class DailyCount:
    date: str
    count: int


@dataclass(frozen=True)
class AnomalyDistribution:
    unit_id: str
    days: int
    total: int = 0
    by_type: List[GroupShare] = field(default_factory=list)
    by_severity: List[GroupShare] = field(default_factory=list)
    by_status: List[GroupShare] = field(default_factory=list)
    trend: List[DailyCount] = field(default_factory=list)


def shares(counts: Dict[str, int], total: int, group: GroupField) -> List[GroupShare]:
    """Raises ValueError for a key outside the group's enum."""
    enum = _GROUP_ENUMS[GroupField(group)]
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
    return [
        GroupShare(key=enum(k), count=n, percentage=round_half_up(n / total * 100) if total else 0)
        for k, n in ordered
    ]


def daily_trend(findings: Iterable[Finding]) -> List[DailyCount]:
    per_day = Counter(f.detected_at.date().isoformat() for f in findings)
    return [DailyCount(date=d, count=per_day[d]) for d in sorted(per_day)]

"""
SQLAlchemy-backed finding store: dedup lookups, inserts, criteria queries,
grouped counts and review transitions.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import Select, func, select

from config import settings
from database import get_db_session
from db_models import FindingRow
from engine.enums import FindingStatus, FindingType, GroupField, Severity
from engine.exceptions import InvalidTransition, NotFoundError
from engine.models import AffectedPeriod, Finding, FindingMetadata, as_utc, utcnow
from store.base import FindingStore
from store.criteria import FindingCriteria
from store.sql import translate_errors, utc_or_none

_GROUP_COLUMNS = {
    GroupField.type: FindingRow.type,
    GroupField.severity: FindingRow.severity,
    GroupField.status: FindingRow.status,
}

# allowed source states per review action
_TRANSITIONS: Dict[FindingStatus, tuple] = {
    FindingStatus.ACKNOWLEDGED: (FindingStatus.OPEN,),
    FindingStatus.RESOLVED: (FindingStatus.OPEN, FindingStatus.ACKNOWLEDGED),
    FindingStatus.FALSE_POSITIVE: (FindingStatus.OPEN, FindingStatus.ACKNOWLEDGED),
}


def _metadata_to_json(metadata: FindingMetadata) -> Dict[str, Any]:
    return {k: v for k, v in asdict(metadata).items() if v is not None}


def _metadata_from_json(raw: Optional[Dict[str, Any]]) -> FindingMetadata:
    known = FindingMetadata.__dataclass_fields__
    return FindingMetadata(**{k: v for k, v in (raw or {}).items() if k in known})


def finding_from_row(row: FindingRow) -> Finding:
    return Finding(
        id=row.finding_id,
        unit_id=row.unit_id,
        type=FindingType(row.type),
        severity=Severity(row.severity),
        status=FindingStatus(row.status),
        detected_at=as_utc(row.detected_at),
        affected_period=AffectedPeriod(start=as_utc(row.period_start), end=utc_or_none(row.period_end)),
        reading_ids=tuple(row.reading_ids or ()),
        description=row.description,
        metadata=_metadata_from_json(row.finding_metadata),
        acknowledged_at=utc_or_none(row.acknowledged_at),
        acknowledged_by=row.acknowledged_by,
        resolved_at=utc_or_none(row.resolved_at),
        resolved_by=row.resolved_by,
        resolution_notes=row.resolution_notes,
    )


def _apply_criteria(stmt: Select, criteria: FindingCriteria) -> Select:
    if criteria.unit_ids:
        stmt = stmt.where(FindingRow.unit_id.in_(criteria.unit_ids))
    if criteria.types:
        stmt = stmt.where(FindingRow.type.in_([t.value for t in criteria.types]))
    if criteria.severities:
        stmt = stmt.where(FindingRow.severity.in_([s.value for s in criteria.severities]))
    if criteria.statuses:
        stmt = stmt.where(FindingRow.status.in_([s.value for s in criteria.statuses]))
    if criteria.detected_from is not None:
        stmt = stmt.where(FindingRow.detected_at >= criteria.detected_from)
    if criteria.detected_to is not None:
        stmt = stmt.where(FindingRow.detected_at <= criteria.detected_to)
    return stmt


class SqlFindingStore(FindingStore):
    @translate_errors
    def find_open_or_acknowledged(
        self,
        unit_id: str,
        finding_type: FindingType,
        period_start: datetime,
    ) -> Optional[Finding]:
        stmt = (
            select(FindingRow)
            .where(
                FindingRow.unit_id == unit_id,
                FindingRow.type == FindingType(finding_type).value,
                FindingRow.period_start == as_utc(period_start),
                FindingRow.status.in_([s.value for s in FindingStatus.unresolved()]),
            )
            .limit(1)
        )
        with get_db_session() as db:
            row = db.execute(stmt).scalars().first()
            return finding_from_row(row) if row is not None else None

    @translate_errors
    def insert(self, finding: Finding) -> Finding:
        finding_id = finding.id or str(uuid.uuid4())
        row = FindingRow(
            finding_id=finding_id,
            unit_id=finding.unit_id,
            type=finding.type.value,
            severity=finding.severity.value,
            status=FindingStatus.OPEN.value,
            detected_at=as_utc(finding.detected_at),
            period_start=as_utc(finding.affected_period.start),
            period_end=utc_or_none(finding.affected_period.end),
            reading_ids=list(finding.reading_ids),
            description=finding.description,
            finding_metadata=_metadata_to_json(finding.metadata),
        )
        with get_db_session() as db:
            db.add(row)
        finding.id = finding_id
        finding.status = FindingStatus.OPEN
        return finding

    @translate_errors
    def find(self, criteria: FindingCriteria) -> List[Finding]:
        stmt = _apply_criteria(select(FindingRow), criteria)
        if criteria.newest_first:
            stmt = stmt.order_by(FindingRow.detected_at.desc(), FindingRow.finding_id.desc())
        else:
            stmt = stmt.order_by(FindingRow.detected_at.asc(), FindingRow.finding_id.asc())
        if criteria.offset:
            stmt = stmt.offset(criteria.offset)
        if criteria.limit is not None:
            stmt = stmt.limit(criteria.limit)
        with get_db_session() as db:
            return [finding_from_row(r) for r in db.execute(stmt).scalars()]

    @translate_errors
    def count(self, criteria: FindingCriteria) -> int:
        stmt = _apply_criteria(select(func.count()).select_from(FindingRow), criteria)
        with get_db_session() as db:
            return int(db.execute(stmt).scalar_one())

    @translate_errors
    def count_by_group(self, criteria: FindingCriteria, group: GroupField) -> Dict[str, int]:
        column = _GROUP_COLUMNS[GroupField(group)]
        stmt = _apply_criteria(select(column, func.count()).select_from(FindingRow), criteria).group_by(column)
        with get_db_session() as db:
            return {str(key): int(n) for key, n in db.execute(stmt).all()}

    def acknowledge(self, finding_id: str, user: str, now: Optional[datetime] = None) -> Finding:
        return self._transition(finding_id, FindingStatus.ACKNOWLEDGED, user, None, now)

    def resolve(self, finding_id: str, user: str, notes: Optional[str] = None, now: Optional[datetime] = None) -> Finding:
        return self._transition(finding_id, FindingStatus.RESOLVED, user, notes, now)

    def mark_false_positive(
        self, finding_id: str, user: str, notes: Optional[str] = None, now: Optional[datetime] = None,
    ) -> Finding:
        return self._transition(finding_id, FindingStatus.FALSE_POSITIVE, user, notes, now)

    @translate_errors
    def _transition(
        self,
        finding_id: str,
        target: FindingStatus,
        user: str,
        notes: Optional[str],
        now: Optional[datetime],
    ) -> Finding:
        ts = as_utc(now) if now is not None else utcnow()
        with get_db_session() as db:
            row = db.get(FindingRow, finding_id)
            if row is None:
                raise NotFoundError(f"finding {finding_id} not found")
            current = FindingStatus(row.status)
            if current not in _TRANSITIONS[target]:
                raise InvalidTransition(f"cannot move finding {finding_id} from {current.value} to {target.value}")
            row.status = target.value
            if target is FindingStatus.ACKNOWLEDGED:
                row.acknowledged_at = ts
                row.acknowledged_by = user
            else:
                row.resolved_at = ts
                row.resolved_by = user
                row.resolution_notes = notes
            db.flush()
            return finding_from_row(row)

    @translate_errors
    def add_findings(self, findings: Iterable[Finding]) -> int:
        """Bulk insert preserving each finding's status and review fields; used for imports and fixtures."""
        n = 0
        with get_db_session() as db:
            for f in findings:
                f.id = f.id or str(uuid.uuid4())
                db.add(FindingRow(
                    finding_id=f.id,
                    unit_id=f.unit_id,
                    type=f.type.value,
                    severity=f.severity.value,
                    status=f.status.value,
                    detected_at=as_utc(f.detected_at),
                    period_start=as_utc(f.affected_period.start),
                    period_end=utc_or_none(f.affected_period.end),
                    reading_ids=list(f.reading_ids),
                    description=f.description,
                    finding_metadata=_metadata_to_json(f.metadata),
                    acknowledged_at=utc_or_none(f.acknowledged_at),
                    acknowledged_by=f.acknowledged_by,
                    resolved_at=utc_or_none(f.resolved_at),
                    resolved_by=f.resolved_by,
                    resolution_notes=f.resolution_notes,
                ))
                n += 1
        return n


@dataclass(frozen=True)
class FindingStats:
    by_status: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)
    recent: int = 0
    total: int = 0


def finding_stats(
    store: FindingStore,
    unit_ids: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> FindingStats:
    now = as_utc(now) if now is not None else utcnow()
    base = FindingCriteria(unit_ids=tuple(unit_ids))
    recent = FindingCriteria(
        unit_ids=base.unit_ids,
        detected_from=now - timedelta(days=settings.stats_recent_days),
        detected_to=now,
    )
    return FindingStats(
        by_status=store.count_by_group(base, GroupField.status),
        by_severity=store.count_by_group(base, GroupField.severity),
        by_type=store.count_by_group(base, GroupField.type),
        recent=store.count(recent),
        total=store.count(base),
    )

"""
Finding listing, statistics and review transitions.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query

from api.requests import AcknowledgeRequest, ResolveRequest
from api.responses import FindingOut, FindingPage, FindingStatsOut
from api.routes.exception import handle_exceptions
from config import settings
from services.findings_service import findings_service
from store.criteria import FindingCriteria

router = APIRouter(tags=["Findings"])


@router.get("/findings", response_model=FindingPage, summary="List findings, newest first")
@handle_exceptions
async def list_findings(
    unit_id: Optional[List[str]] = Query(default=None),
    type: Optional[List[str]] = Query(default=None),
    severity: Optional[List[str]] = Query(default=None),
    status: Optional[List[str]] = Query(default=None),
    detected_from: Optional[datetime] = None,
    detected_to: Optional[datetime] = None,
    limit: int = settings.findings_default_limit,
    offset: int = 0,
) -> FindingPage:
    criteria = FindingCriteria(
        unit_ids=tuple(unit_id or ()),
        types=tuple(type or ()),
        severities=tuple(severity or ()),
        statuses=tuple(status or ()),
        detected_from=detected_from,
        detected_to=detected_to,
        limit=limit,
        offset=offset,
    )
    items, total = await findings_service.list_findings(criteria)
    return FindingPage(
        items=[FindingOut.model_validate(f) for f in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/findings/stats", response_model=FindingStatsOut, summary="Finding counts by status, severity and type")
@handle_exceptions
async def finding_stats(unit_id: Optional[List[str]] = Query(default=None)) -> FindingStatsOut:
    return FindingStatsOut.model_validate(await findings_service.stats(unit_id or ()))


@router.patch("/findings/{finding_id}/acknowledge", response_model=FindingOut)
@handle_exceptions
async def acknowledge_finding(finding_id: str, req: AcknowledgeRequest) -> FindingOut:
    return FindingOut.model_validate(await findings_service.acknowledge(finding_id, req.user))


@router.patch("/findings/{finding_id}/resolve", response_model=FindingOut)
@handle_exceptions
async def resolve_finding(finding_id: str, req: ResolveRequest) -> FindingOut:
    return FindingOut.model_validate(await findings_service.resolve(finding_id, req.user, req.notes))


@router.patch("/findings/{finding_id}/false-positive", response_model=FindingOut)
@handle_exceptions
async def mark_false_positive(finding_id: str, req: ResolveRequest) -> FindingOut:
    return FindingOut.model_validate(await findings_service.mark_false_positive(finding_id, req.user, req.notes))

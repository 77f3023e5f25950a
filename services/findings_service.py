"""
Finding queries, statistics and review transitions for the HTTP surface.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Tuple

from engine.models import Finding
from store.criteria import FindingCriteria
from store.findings import FindingStats, SqlFindingStore, finding_stats


class FindingsService:
    def __init__(self, store: Optional[SqlFindingStore] = None) -> None:
        self.store = store or SqlFindingStore()

    async def list_findings(self, criteria: FindingCriteria) -> Tuple[List[Finding], int]:
        def _list() -> Tuple[List[Finding], int]:
            return self.store.find(criteria), self.store.count(criteria.unpaged())

        return await asyncio.to_thread(_list)

    async def stats(self, unit_ids: Iterable[str] = ()) -> FindingStats:
        return await asyncio.to_thread(finding_stats, self.store, tuple(unit_ids))

    async def acknowledge(self, finding_id: str, user: str) -> Finding:
        return await asyncio.to_thread(self.store.acknowledge, finding_id, user)

    async def resolve(self, finding_id: str, user: str, notes: Optional[str] = None) -> Finding:
        return await asyncio.to_thread(self.store.resolve, finding_id, user, notes)

    async def mark_false_positive(self, finding_id: str, user: str, notes: Optional[str] = None) -> Finding:
        return await asyncio.to_thread(self.store.mark_false_positive, finding_id, user, notes)


findings_service = FindingsService()

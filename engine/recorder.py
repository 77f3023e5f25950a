"""
Sole write path from detection into the finding store. Suppresses findings that
already have an unresolved counterpart for the same unit, type and period start.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Iterable

from engine.exceptions import PartialRecordError
from engine.models import Finding
from store.base import FindingStore

log = logging.getLogger(__name__)


class FindingRecorder:
    def __init__(self, store: FindingStore) -> None:
        self._store = store

    def record_one(self, finding: Finding) -> bool:
        unit_id, ftype, start = finding.dedup_key
        if self._store.find_open_or_acknowledged(unit_id, ftype, start) is not None:
            log.debug("Duplicate %s for unit %s at %s skipped", ftype.value, unit_id, start.isoformat())
            return False
        self._store.insert(finding)
        log.info("Finding saved: %s for unit %s at %s", ftype.value, unit_id, start.isoformat())
        return True

    def record(self, findings: Iterable[Finding]) -> int:
        """Findings inserted before a store failure stay stored; their count rides on the error."""
        saved = 0
        for finding in findings:
            try:
                if self.record_one(finding):
                    saved += 1
            except Exception as exc:
                log.error("Recording stopped for unit %s with %d findings already saved", finding.unit_id, saved)
                raise PartialRecordError(f"recording failed after {saved} saved: {exc}", saved=saved) from exc
        return saved

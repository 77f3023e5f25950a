"""
Validated query criteria for finding lookups.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from config import settings
from engine.enums import FindingStatus, FindingType, Severity
from engine.exceptions import ValidationError
from engine.models import as_utc


def _enum_tuple(values, enum_cls, label: str) -> tuple:
    out = []
    for v in values or ():
        try:
            out.append(enum_cls(v))
        except ValueError:
            valid = [m.value for m in enum_cls]
            raise ValidationError(f"unknown {label} '{v}'. Valid values: {valid}") from None
    return tuple(out)


@dataclass(frozen=True)
class FindingCriteria:
    unit_ids: Tuple[str, ...] = ()
    types: Tuple[FindingType, ...] = ()
    severities: Tuple[Severity, ...] = ()
    statuses: Tuple[FindingStatus, ...] = ()
    detected_from: Optional[datetime] = None
    detected_to: Optional[datetime] = None
    limit: Optional[int] = None
    offset: int = 0
    newest_first: bool = field(default=True)

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit_ids", tuple(str(u) for u in self.unit_ids))
        object.__setattr__(self, "types", _enum_tuple(self.types, FindingType, "finding type"))
        object.__setattr__(self, "severities", _enum_tuple(self.severities, Severity, "severity"))
        object.__setattr__(self, "statuses", _enum_tuple(self.statuses, FindingStatus, "status"))

        if self.detected_from is not None:
            object.__setattr__(self, "detected_from", as_utc(self.detected_from))
        if self.detected_to is not None:
            object.__setattr__(self, "detected_to", as_utc(self.detected_to))
        if self.detected_from and self.detected_to and self.detected_from > self.detected_to:
            raise ValidationError("detected_from must not be after detected_to")

        if self.limit is not None and not 1 <= self.limit <= settings.findings_max_limit:
            raise ValidationError(f"limit must be within [1, {settings.findings_max_limit}]")
        if self.offset < 0:
            raise ValidationError("offset must be >= 0")

    def unpaged(self) -> FindingCriteria:
        return FindingCriteria(
            unit_ids=self.unit_ids,
            types=self.types,
            severities=self.severities,
            statuses=self.statuses,
            detected_from=self.detected_from,
            detected_to=self.detected_to,
            newest_first=self.newest_first,
        )

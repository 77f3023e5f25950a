"""
Store interfaces consumed by the detection and analytics engines.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from engine.enums import FindingType, GroupField, UnitStatus
from engine.models import Finding, Reading, Unit
from store.criteria import FindingCriteria


class ReadingStore(ABC):
    @abstractmethod
    def find_readings(
        self,
        unit_id: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> List[Reading]:
        """Readings for a unit, oldest first."""

    @abstractmethod
    def count_readings(self) -> int: ...


class UnitStore(ABC):
    @abstractmethod
    def find_active_units(self) -> List[Unit]: ...

    @abstractmethod
    def find_unit(self, unit_id: str) -> Optional[Unit]: ...

    @abstractmethod
    def count_units(self, status: Optional[UnitStatus] = None) -> int: ...


class FindingStore(ABC):
    @abstractmethod
    def find_open_or_acknowledged(
        self,
        unit_id: str,
        finding_type: FindingType,
        period_start: datetime,
    ) -> Optional[Finding]: ...

    @abstractmethod
    def insert(self, finding: Finding) -> Finding: ...

    @abstractmethod
    def find(self, criteria: FindingCriteria) -> List[Finding]: ...

    @abstractmethod
    def count(self, criteria: FindingCriteria) -> int: ...

    @abstractmethod
    def count_by_group(self, criteria: FindingCriteria, group: GroupField) -> Dict[str, int]: ...

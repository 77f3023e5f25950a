import pytest
from pydantic import ValidationError

from api.requests import AcknowledgeRequest, ResolveRequest
from api.responses import AnomalyDistributionOut, FindingOut
from engine.analytics.distribution import AnomalyDistribution, shares
from engine.enums import FindingStatus, FindingType, GroupField, Severity
from fakes import at, finding


def test_review_requests_require_user():
    assert AcknowledgeRequest(user="ops").user == "ops"
    with pytest.raises(ValidationError):
        AcknowledgeRequest(user="")
    with pytest.raises(ValidationError):
        ResolveRequest(notes="n")


def test_finding_out_from_dataclass():
    f = finding(start=at(0, 22))
    f.id = "f-1"
    out = FindingOut.model_validate(f)
    data = out.model_dump(mode="json")
    assert data["type"] == "NIGHTTIME_GENERATION"
    assert data["severity"] == "CRITICAL"
    assert data["affected_period"]["start"].startswith("2026-06-01T22:00:00")
    assert data["reading_ids"] == []


def test_distribution_out_keeps_enum_group_keys():
    dist = AnomalyDistribution(
        unit_id="u1",
        days=30,
        total=3,
        by_type=shares({"FROZEN_GENERATION": 2, "NIGHTTIME_GENERATION": 1}, 3, GroupField.type),
        by_severity=shares({"WARNING": 2, "CRITICAL": 1}, 3, GroupField.severity),
        by_status=shares({"OPEN": 3}, 3, GroupField.status),
    )
    out = AnomalyDistributionOut.model_validate(dist)
    assert out.by_type[0].key is FindingType.FROZEN_GENERATION
    assert out.by_severity[1].key is Severity.CRITICAL
    assert out.by_status[0].key is FindingStatus.OPEN
    data = out.model_dump(mode="json")
    assert [s["key"] for s in data["by_type"]] == ["FROZEN_GENERATION", "NIGHTTIME_GENERATION"]
    assert data["by_status"] == [{"key": "OPEN", "count": 3, "percentage": 100}]

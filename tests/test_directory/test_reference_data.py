"""
Tests for contractors, quality reports and province statistics
"""

from datetime import date

import pytest

from public_works_ledger.directory.models import InspectionStatus
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.errors import ContractorNotFound, DuplicateId, ProjectNotFound


def test_demo_contractors_loaded(demo_engine: GovernanceEngine) -> None:
    contractors = demo_engine.get_contractors()

    assert [c.id for c in contractors] == ["c1", "c2", "c3"]
    assert contractors[0].registered_date == date(2018, 1, 15)


def test_contractor_specialization_filter_is_case_insensitive(
    demo_engine: GovernanceEngine,
) -> None:
    found = demo_engine.get_contractors({"specialization": "construction"})

    assert [c.name for c in found] == ["Ram Kumar Shrestha", "Sita Devi Tamang"]


def test_contractor_verified_filter(demo_engine: GovernanceEngine) -> None:
    demo_engine.register_contractor(
        {"name": "Bikash Thapa", "company": "Thapa Traders", "specialization": "Bridges"}
    )

    unverified = demo_engine.get_contractors({"verified": False})
    assert [c.company for c in unverified] == ["Thapa Traders"]
    assert len(demo_engine.get_contractors({"verified": True})) == 3


def test_register_contractor_defaults(engine: GovernanceEngine) -> None:
    contractor = engine.register_contractor({"name": "Bikash Thapa", "company": "Thapa Traders"})

    assert contractor.id == "id-1"
    assert contractor.registered_date == date(2024, 2, 1)
    assert contractor.verified is False
    assert contractor.rating == 0.0


def test_register_contractor_duplicate_id(demo_engine: GovernanceEngine) -> None:
    with pytest.raises(DuplicateId):
        demo_engine.register_contractor({"id": "c1", "name": "Ram", "company": "Other"})


def test_contractor_projects(demo_engine: GovernanceEngine) -> None:
    projects = demo_engine.get_contractor_projects("c2")

    assert [p.title for p in projects] == ["Pokhara International Airport"]


def test_contractor_projects_unknown_contractor(demo_engine: GovernanceEngine) -> None:
    with pytest.raises(ContractorNotFound):
        demo_engine.get_contractor_projects("nobody")


def test_quality_reports_by_project(demo_engine: GovernanceEngine) -> None:
    reports = demo_engine.get_quality_reports("3")

    assert len(reports) == 1
    assert reports[0].status == InspectionStatus.NEEDS_IMPROVEMENT
    assert reports[0].project_name == "Melamchi Water Supply Phase 2"
    assert len(demo_engine.get_quality_reports()) == 2


def test_file_quality_report(demo_engine: GovernanceEngine) -> None:
    report = demo_engine.file_quality_report(
        {
            "projectId": "2",
            "inspectorName": "Er. Sunita KC",
            "status": "PASSED",
            "findings": "Runway surface within tolerance.",
        }
    )

    assert report.id == "id-1"
    assert report.inspection_date == date(2024, 2, 1)
    assert report.project_name == "Pokhara International Airport"


def test_file_quality_report_unknown_project(engine: GovernanceEngine) -> None:
    with pytest.raises(ProjectNotFound):
        engine.file_quality_report(
            {"projectId": "nope", "inspectorName": "Er. Sunita KC", "status": "FAILED"}
        )


def test_province_stats(demo_engine: GovernanceEngine) -> None:
    provinces = demo_engine.get_province_stats()

    assert len(provinces) == 7
    assert provinces[2].name == "Bagmati"
    assert provinces[2].spent == 21_600_000_000


def test_record_province_stats_replaces(demo_engine: GovernanceEngine) -> None:
    stats = demo_engine.record_province_stats(
        {
            "name": "Karnali",
            "projects": 101,
            "utilization": 50,
            "completion": 30,
            "budget": 10_000_000_000,
            "spent": 5_000_000_000,
        }
    )

    assert stats.projects == 101
    provinces = demo_engine.get_province_stats()
    assert len(provinces) == 7
    assert [p.projects for p in provinces if p.name == "Karnali"] == [101]
    assert demo_engine.event_store.get_stream_version("province-karnali") == 2

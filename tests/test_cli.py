"""
Tests for the pwl command-line interface
"""

import json

import pytest
from typer.testing import CliRunner

from public_works_ledger.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_advisory_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep analyze commands on the deterministic fallback"""
    monkeypatch.delenv("PWL_ADVISORY_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


def test_validate_valid() -> None:
    result = runner.invoke(app, ["validate", "CENTRAL", "LARGE", "10000000000"])

    assert result.exit_code == 0
    assert "Project size and budget are valid" in result.stdout


def test_validate_invalid_exits_nonzero() -> None:
    result = runner.invoke(app, ["validate", "LOCAL", "MEDIUM", "2000000000"])

    assert result.exit_code == 1


def test_sizes() -> None:
    result = runner.invoke(app, ["sizes"])

    assert result.exit_code == 0
    assert "Rs. 50.00 Billion" in result.stdout
    assert "PROVINCIAL" in result.stdout


def test_stats_json() -> None:
    result = runner.invoke(app, ["stats", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["totalBudget"] == 150_000_000_000
    assert data["spentBudget"] == 45_000_000_000


def test_stats_empty() -> None:
    result = runner.invoke(app, ["stats", "--json", "--empty"])

    assert json.loads(result.stdout)["allocatedBudget"] == 0


def test_projects_filtered() -> None:
    result = runner.invoke(app, ["projects", "--status", "COMPLETED", "--json"])

    assert result.exit_code == 0
    assert [p["id"] for p in json.loads(result.stdout)] == ["2"]


def test_projects_bad_status() -> None:
    result = runner.invoke(app, ["projects", "--status", "FINISHED"])

    assert result.exit_code == 1


def test_analyze_allocation() -> None:
    result = runner.invoke(
        app,
        [
            "analyze",
            "allocation",
            "--recipient",
            "Karnali Province",
            "--type",
            "PROVINCE",
            "--amount",
            "5000000000",
            "--purpose",
            "Rural roads",
        ],
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["simulated"] is True
    assert data["riskLevel"] == "LOW"


def test_analyze_project() -> None:
    result = runner.invoke(
        app,
        [
            "analyze",
            "project",
            "--title",
            "Sindhuli Corridor Upgrade",
            "--budget",
            "12000000000",
            "--size",
            "LARGE",
            "--level",
            "CENTRAL",
            "--province",
            "Bagmati",
            "--local-unit",
            "Sindhuli",
            "--start",
            "2024-01-01",
            "--end",
            "2027-01-01",
        ],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["timelineMonths"] == 37


def test_analyze_project_bad_date() -> None:
    result = runner.invoke(
        app,
        [
            "analyze", "project", "--title", "X", "--budget", "12000000000",
            "--size", "LARGE", "--level", "CENTRAL", "--province", "Bagmati",
            "--local-unit", "Sindhuli", "--start", "soon", "--end", "2027-01-01",
        ],
    )

    assert result.exit_code == 1


def test_analyze_contractor() -> None:
    result = runner.invoke(app, ["analyze", "contractor", "c2"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["overallRating"] == 5.0


def test_analyze_unknown_contractor() -> None:
    result = runner.invoke(app, ["analyze", "contractor", "nobody"])

    assert result.exit_code == 1

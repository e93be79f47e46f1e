"""
Tests for the advisory service

The remote model is replaced by httpx.MockTransport. Verifies:
- A well-formed reply is validated and returned
- Error statuses, bad JSON, schema mismatches and transport errors all
  fall back to the deterministic analysis (simulated=True)
- Fallback figures are deterministic
"""

import json
from datetime import date

import httpx
import pytest

from public_works_ledger.advisory import fallback
from public_works_ledger.advisory.client import AdvisoryClient, AdvisoryError, extract_json
from public_works_ledger.advisory.config import AdvisorySettings
from public_works_ledger.advisory.service import AdvisoryService
from public_works_ledger.allocation.commands import AllocateBudget
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.projects.commands import CreateProject

MODEL_ANALYSIS = {
    "feasibilityScore": 72,
    "riskLevel": "MEDIUM",
    "recommendations": ["Stage the disbursement"],
    "potentialIssues": ["Monsoon delays"],
    "benchmarkComparison": "In line with past Karnali allocations",
    "approvalRecommendation": "APPROVE_WITH_CONDITIONS",
}


def messages_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})


def make_service(handler, max_attempts: int = 2) -> AdvisoryService:
    settings = AdvisorySettings(
        api_key="test-key",
        base_url="https://advisory.test",
        max_attempts=max_attempts,
    )
    client = AdvisoryClient(settings, transport=httpx.MockTransport(handler))
    return AdvisoryService(settings=settings, client=client)


@pytest.fixture
def allocation() -> AllocateBudget:
    return AllocateBudget(
        recipient="Karnali Province",
        recipient_type="PROVINCE",
        amount=5_000_000_000,
        purpose="Rural road network",
    )


@pytest.fixture
def project() -> CreateProject:
    return CreateProject(
        title="Sindhuli Corridor Upgrade",
        budget=12_000_000_000,
        size="LARGE",
        created_by="CENTRAL",
        province="Bagmati",
        local_unit="Sindhuli",
        start_date=date(2024, 1, 1),
        end_date=date(2027, 1, 1),
    )


def test_model_reply_is_used(allocation: AllocateBudget) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return messages_reply("```json\n" + json.dumps(MODEL_ANALYSIS) + "\n```")

    service = make_service(handler)
    analysis = service.analyze_allocation(allocation)

    assert analysis.simulated is False
    assert analysis.feasibility_score == 72
    assert seen[0].url.path == "/v1/messages"
    assert seen[0].headers["x-api-key"] == "test-key"
    body = json.loads(seen[0].content)
    assert "Karnali Province" in body["messages"][0]["content"]


def test_error_status_falls_back(allocation: AllocateBudget) -> None:
    service = make_service(lambda request: httpx.Response(500, json={"error": "boom"}))

    analysis = service.analyze_allocation(allocation)

    assert analysis.simulated is True
    assert analysis == fallback.allocation_analysis(allocation)


def test_invalid_json_falls_back(allocation: AllocateBudget) -> None:
    service = make_service(lambda request: messages_reply("Looks fine to me!"))

    assert service.analyze_allocation(allocation).simulated is True


def test_schema_mismatch_falls_back(allocation: AllocateBudget) -> None:
    reply = dict(MODEL_ANALYSIS, riskLevel="EXTREME")
    service = make_service(lambda request: messages_reply(json.dumps(reply)))

    assert service.analyze_allocation(allocation).simulated is True


def test_unknown_keys_fall_back(allocation: AllocateBudget) -> None:
    reply = dict(MODEL_ANALYSIS, approved=True)
    service = make_service(lambda request: messages_reply(json.dumps(reply)))

    assert service.analyze_allocation(allocation).simulated is True


def test_transport_error_is_retried_then_falls_back(allocation: AllocateBudget) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    service = make_service(handler, max_attempts=2)
    analysis = service.analyze_allocation(allocation)

    assert len(calls) == 2
    assert analysis.simulated is True


def test_transport_error_recovers_on_retry(allocation: AllocateBudget) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return messages_reply(json.dumps(MODEL_ANALYSIS))

    analysis = make_service(handler).analyze_allocation(allocation)

    assert len(calls) == 2
    assert analysis.simulated is False


def test_no_api_key_uses_fallback_without_network(
    allocation: AllocateBudget, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PWL_ADVISORY_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    service = AdvisoryService()

    assert service.client is None
    assert service.analyze_allocation(allocation).simulated is True


def test_submit_runs_in_background(allocation: AllocateBudget) -> None:
    service = AdvisoryService(settings=AdvisorySettings())
    try:
        future = service.submit(service.analyze_allocation, allocation)
        analysis = future.result(timeout=5)
    finally:
        service.close()

    assert analysis.risk_level == "LOW"


def test_extract_json_rejects_garbage() -> None:
    with pytest.raises(AdvisoryError):
        extract_json("not json")

    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PWL_ADVISORY_API_KEY", raising=False)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "fallback-key")
    monkeypatch.setenv("PWL_ADVISORY_TIMEOUT_SECONDS", "5")

    settings = AdvisorySettings.from_env()

    assert settings.api_key == "fallback-key"
    assert settings.timeout_seconds == 5.0
    assert settings.enabled is True


# Deterministic fallbacks


@pytest.mark.parametrize(
    "amount,score,risk,recommendation",
    [
        (5_000_000_000, 90, "LOW", "APPROVE"),
        (20_000_000_000, 80, "MEDIUM", "APPROVE"),
        (120_000_000_000, 65, "HIGH", "APPROVE_WITH_CONDITIONS"),
    ],
)
def test_allocation_fallback_tiers(
    amount: int, score: int, risk: str, recommendation: str
) -> None:
    command = AllocateBudget(
        recipient="Madhesh Province", recipient_type="PROVINCE", amount=amount, purpose="Roads"
    )

    analysis = fallback.allocation_analysis(command)

    assert analysis.feasibility_score == score
    assert analysis.risk_level == risk
    assert analysis.approval_recommendation == recommendation


def test_project_fallback(project: CreateProject) -> None:
    feasibility = fallback.project_feasibility(project, GovernancePolicy())

    assert feasibility.simulated is True
    assert feasibility.technical_feasibility == "COMPLEX"
    assert feasibility.timeline_months == 37
    assert feasibility.timeline_assessment == "REALISTIC"
    assert feasibility.cost_breakdown.construction == 7_200_000_000
    assert feasibility.cost_breakdown.contingency == 1_440_000_000
    assert feasibility.verdict.startswith("RECOMMENDED FOR APPROVAL")


def test_contractor_fallback_from_projects() -> None:
    engine = GovernanceEngine.with_demo_data()
    contractor = engine.get_contractor("c2")

    rating = fallback.contractor_rating(contractor, engine.get_contractor_projects("c2"))

    assert rating.simulated is True
    assert rating.overall_rating == 5.0
    assert rating.categories.time_management == 5.0
    assert rating.categories.budget_adherence == 5.0
    assert rating.categories.quality == 4.2


def test_contractor_fallback_without_projects() -> None:
    engine = GovernanceEngine.with_demo_data()
    contractor = engine.register_contractor({"name": "New Co", "company": "New Co Pvt Ltd"})

    rating = fallback.contractor_rating(contractor, [])

    assert rating.categories.time_management == 0.0
    assert rating.categories.budget_adherence == 5.0
    assert rating.overall_rating == 3.0

"""
Advisory Service - best-effort analysis that never gates a command

Each analysis tries the remote model when one is configured and falls back
to the deterministic computation on any failure. None of the public methods
raise. Nothing here touches engine state: results are returned to the caller
for a human to weigh before issuing the command.

Analyses can also be submitted to a small thread pool; the returned Future
can be cancelled or waited on with a timeout while the caller keeps working.
"""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from public_works_ledger.advisory import fallback, prompts
from public_works_ledger.advisory.client import AdvisoryClient, AdvisoryError, extract_json
from public_works_ledger.advisory.config import AdvisorySettings
from public_works_ledger.advisory.models import (
    AllocationAnalysis,
    ContractorRating,
    ProjectFeasibility,
)
from public_works_ledger.allocation.commands import AllocateBudget
from public_works_ledger.directory.models import Contractor
from public_works_ledger.kernel.governance_policy import (
    GovernancePolicy,
    default_governance_policy,
)
from public_works_ledger.kernel.logging import get_logger
from public_works_ledger.kernel.metrics import advisory_requests_total
from public_works_ledger.projects.commands import CreateProject
from public_works_ledger.projects.models import Project

logger = get_logger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


class AdvisoryService:
    """
    Front door for advisory analyses

    Args:
        settings: Remote model settings (defaults to the environment)
        policy: Budget ranges used by the project fallback
        client: Pre-built client; built from settings when omitted and
            settings carry an API key
    """

    def __init__(
        self,
        settings: AdvisorySettings | None = None,
        policy: GovernancePolicy | None = None,
        client: AdvisoryClient | None = None,
    ) -> None:
        self.settings = settings or AdvisorySettings.from_env()
        self.policy = policy or default_governance_policy
        if client is None and self.settings.enabled:
            client = AdvisoryClient(self.settings)
        self.client = client
        self._executor: ThreadPoolExecutor | None = None

    def _analyze(
        self,
        analysis: str,
        schema: type[ResultT],
        prompt: Callable[[], str],
        simulate: Callable[[], ResultT],
        max_tokens: int,
    ) -> ResultT:
        if self.client is None:
            advisory_requests_total.labels(analysis=analysis, source="fallback").inc()
            return simulate()

        try:
            data = extract_json(self.client.complete(prompt(), max_tokens=max_tokens))
            if not isinstance(data, dict):
                raise AdvisoryError("Model returned JSON that is not an object")
            data.pop("simulated", None)
            result = schema.model_validate(data)
        except (AdvisoryError, ValidationError) as e:
            logger.warning(
                "Advisory analysis unavailable, using fallback",
                analysis=analysis,
                reason=str(e),
            )
            advisory_requests_total.labels(analysis=analysis, source="fallback").inc()
            return simulate()

        advisory_requests_total.labels(analysis=analysis, source="model").inc()
        return result

    def analyze_allocation(self, command: AllocateBudget) -> AllocationAnalysis:
        """Feasibility and risk of a proposed allocation"""
        return self._analyze(
            "allocation",
            AllocationAnalysis,
            lambda: prompts.allocation_prompt(command, self.policy.fiscal_year),
            lambda: fallback.allocation_analysis(command),
            max_tokens=1500,
        )

    def analyze_project(self, command: CreateProject) -> ProjectFeasibility:
        """Feasibility review of a proposed project"""
        return self._analyze(
            "project",
            ProjectFeasibility,
            lambda: prompts.project_prompt(command),
            lambda: fallback.project_feasibility(command, self.policy),
            max_tokens=2000,
        )

    def rate_contractor(
        self, contractor: Contractor, projects: list[Project]
    ) -> ContractorRating:
        """
        Rate a contractor from the projects assigned to them

        The stored contractor rating is never changed by this.
        """
        return self._analyze(
            "contractor",
            ContractorRating,
            lambda: prompts.contractor_prompt(contractor, projects),
            lambda: fallback.contractor_rating(contractor, projects),
            max_tokens=1500,
        )

    def submit(self, analysis: Callable[..., ResultT], *args: object) -> Future:
        """
        Run an analysis method in the background

        Example:
            future = service.submit(service.analyze_allocation, command)
            analysis = future.result(timeout=30)
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=2, thread_name_prefix="pwl-advisory"
            )
        return self._executor.submit(analysis, *args)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
        if self.client is not None:
            self.client.close()

"""
GovernanceEngine - Main façade class

This is the primary interface to the Public Works Ledger. It hides the event
store, projections and command handlers behind plain methods.

Every mutating method runs as one atomic unit under a single re-entrant lock:
read current state from projections, validate, append events, apply them.
A rejected command raises before anything is appended, so no partial change
is ever visible.

Example:
    >>> from public_works_ledger import GovernanceEngine
    >>> engine = GovernanceEngine.with_demo_data()
    >>> engine.validate_project_size("LOCAL", "MEDIUM", 2_000_000_000).valid
    False
    >>> allocation = engine.allocate_budget({
    ...     "recipient": "Karnali Province",
    ...     "recipientType": "PROVINCE",
    ...     "amount": 5_000_000_000,
    ...     "purpose": "Rural roads",
    ... })
    >>> engine.get_national_stats().allocated_budget
    105000000000
"""

import threading
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel

from public_works_ledger.allocation.commands import (
    AllocateBudget,
    AllocationFilters,
    ImportAllocation,
    OpenFiscalPeriod,
)
from public_works_ledger.allocation.handlers import AllocationCommandHandlers
from public_works_ledger.allocation.models import BudgetAllocation, NationalTotals
from public_works_ledger.allocation.projections import (
    AllocationLedger,
    NationalTotalsProjection,
)
from public_works_ledger.command_api import CommandAPI
from public_works_ledger.decisions.commands import DecidePolicy, ImportPolicy, ProposePolicy
from public_works_ledger.decisions.handlers import DecisionCommandHandlers
from public_works_ledger.decisions.models import PolicyDecision, PolicyStatus
from public_works_ledger.decisions.projections import PolicyRegistry
from public_works_ledger.directory.commands import (
    ContractorFilters,
    FileQualityReport,
    RecordProvinceStats,
    RegisterContractor,
)
from public_works_ledger.directory.handlers import DirectoryCommandHandlers
from public_works_ledger.directory.models import Contractor, ProvinceStats, QualityReport
from public_works_ledger.directory.projections import (
    ContractorDirectory,
    ProvinceStatsTable,
    QualityReportLog,
)
from public_works_ledger.kernel.errors import CommandIdConflict, ContractorNotFound
from public_works_ledger.kernel.event_store import InMemoryEventStore
from public_works_ledger.kernel.events import Event
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.kernel.ids import DefaultIdFactory, IdFactory, generate_id
from public_works_ledger.kernel.logging import LogOperation, get_logger
from public_works_ledger.kernel.metrics import (
    allocations_total,
    payments_processed_total,
    track_command_duration,
    update_national_budget_metrics,
)
from public_works_ledger.kernel.time import RealTimeProvider, TimeProvider
from public_works_ledger.payments.commands import (
    ImportPaymentRequest,
    ProcessPayment,
    SubmitPaymentRequest,
)
from public_works_ledger.payments.handlers import PaymentCommandHandlers
from public_works_ledger.payments.models import PaymentRequest, PaymentStatus
from public_works_ledger.payments.projections import PaymentLedger
from public_works_ledger.projects.commands import (
    CreateProject,
    ImportProject,
    ProjectFilters,
    ProjectUpdate,
    UpdateProject,
)
from public_works_ledger.projects.handlers import ProjectCommandHandlers
from public_works_ledger.projects.invariants import validate_mutable_fields
from public_works_ledger.projects.models import Project
from public_works_ledger.projects.projections import ProjectRegistry
from public_works_ledger.rules.invariants import validate_project_size
from public_works_ledger.rules.models import GovernmentLevel, ProjectSize, ValidationResult
from public_works_ledger.seed import NATIONAL_TOTALS, load_demo_data

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: type[ModelT], data: ModelT | dict[str, Any]) -> ModelT:
    """Accept either a command model or a plain dict (snake_case or camelCase keys)"""
    if isinstance(data, model):
        return data
    return model.model_validate(data)


class GovernanceEngine:
    """
    Public Works Ledger main façade

    Provides a unified API for:
    - Project creation and updates under the validation engine
    - Budget allocation from the national pool
    - Policy proposals and decisions
    - Payment requests and settlement
    - Contractor, quality report and province reference data
    """

    def __init__(
        self,
        policy: GovernancePolicy | None = None,
        time_provider: TimeProvider | None = None,
        id_factory: IdFactory | None = None,
        opening_totals: OpenFiscalPeriod | dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            policy: Rule-engine parameters (defaults if None)
            time_provider: Time provider (real time if None)
            id_factory: Entity id generator (UUIDv7-like if None)
            opening_totals: Opening national figures; when None the period
                opens with the policy's national_total_budget and nothing
                allocated or spent
        """
        self.policy = policy or GovernancePolicy()
        self.time_provider = time_provider or RealTimeProvider()
        self.id_factory = id_factory or DefaultIdFactory()
        self._lock = threading.RLock()
        # command_id -> operation that first used it
        self._command_operations: dict[str, str] = {}

        # Initialize infrastructure
        self.event_store = InMemoryEventStore()
        self.project_handlers = ProjectCommandHandlers(
            self.time_provider, self.policy, self.id_factory
        )
        self.allocation_handlers = AllocationCommandHandlers(
            self.time_provider, self.policy, self.id_factory
        )
        self.decision_handlers = DecisionCommandHandlers(self.time_provider, self.id_factory)
        self.payment_handlers = PaymentCommandHandlers(
            self.time_provider, self.policy, self.id_factory
        )
        self.directory_handlers = DirectoryCommandHandlers(self.time_provider, self.id_factory)

        # Initialize projections
        self.project_registry = ProjectRegistry()
        self.allocation_ledger = AllocationLedger()
        self.national_totals = NationalTotalsProjection()
        self.policy_registry = PolicyRegistry()
        self.payment_ledger = PaymentLedger()
        self.contractor_directory = ContractorDirectory()
        self.quality_reports = QualityReportLog()
        self.province_stats = ProvinceStatsTable()

        self._projections = [
            self.project_registry,
            self.allocation_ledger,
            self.national_totals,
            self.policy_registry,
            self.payment_ledger,
            self.contractor_directory,
            self.quality_reports,
            self.province_stats,
        ]

        if opening_totals is None:
            opening_totals = OpenFiscalPeriod(total_budget=self.policy.national_total_budget)
        self.open_fiscal_period(opening_totals, actor_id="system")

    @classmethod
    def with_demo_data(cls, **kwargs: Any) -> "GovernanceEngine":
        """Engine preloaded with the demo data set (see public_works_ledger.seed)"""
        kwargs.setdefault("opening_totals", NATIONAL_TOTALS)
        engine = cls(**kwargs)
        load_demo_data(engine)
        return engine

    @property
    def api(self) -> CommandAPI:
        """Envelope-returning view of this engine ({success, data, error})"""
        return CommandAPI(self)

    # ==================================================================
    # Internals
    # ==================================================================

    def _apply_event(self, event: Event) -> None:
        for projection in self._projections:
            projection.apply_event(event)

    def _execute(
        self,
        operation: str,
        handle: Callable[[str], list[Event]],
        command_id: str | None,
        actor_id: str | None,
        on_applied: Callable[[list[Event]], None] | None = None,
        **context: Any,
    ) -> list[Event]:
        """
        Run one command atomically

        If command_id was already executed by the same operation, its original
        events are returned and nothing is re-applied (on_applied is not called
        either). Reusing it for a different operation raises CommandIdConflict.
        """
        with self._lock:
            if command_id:
                recorded = self._command_operations.get(command_id)
                if recorded is not None and recorded != operation:
                    raise CommandIdConflict(command_id, recorded, operation)
                existing = self.event_store.get_events_by_command_id(command_id)
                if existing:
                    logger.info(
                        "Command already executed, returning original result",
                        operation=operation,
                        command_id=command_id,
                    )
                    return existing

            command_id = command_id or generate_id()
            with LogOperation(
                logger, operation, command_id=command_id, actor_id=actor_id, **context
            ):
                events = handle(command_id)
                self._command_operations[command_id] = operation
                for event in events:
                    self.event_store.append(event.stream_id, event.version - 1, [event])
                    self._apply_event(event)
                if on_applied is not None:
                    on_applied(events)

            return events

    def _refresh_budget_metrics(self) -> None:
        totals = self.national_totals.totals
        update_national_budget_metrics(
            totals.total_budget, totals.allocated_budget, totals.spent_budget
        )

    # ==================================================================
    # National totals
    # ==================================================================

    @track_command_duration("open_fiscal_period")
    def open_fiscal_period(
        self,
        totals: OpenFiscalPeriod | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = "system",
    ) -> NationalTotals:
        """
        Open the national totals with the figures of a fiscal period

        The constructor already opens the period (from opening_totals), so any
        later call is refused.

        Args:
            totals: totalBudget plus optional allocated/spent amounts and counters

        Raises:
            FiscalPeriodAlreadyOpen: The period is already open
        """
        command = _coerce(OpenFiscalPeriod, totals)
        self._execute(
            "open_fiscal_period",
            lambda cid: self.allocation_handlers.handle_open_fiscal_period(
                command, cid, actor_id, self.national_totals
            ),
            command_id,
            actor_id,
            total_budget=command.total_budget,
        )
        self._refresh_budget_metrics()
        return self.get_national_stats()

    def get_national_stats(self) -> NationalTotals:
        with self._lock:
            return self.national_totals.get()

    # ==================================================================
    # Validation engine
    # ==================================================================

    def validate_project_size(
        self,
        level: GovernmentLevel | str,
        size: ProjectSize | str,
        budget: int,
    ) -> ValidationResult:
        """
        Check a (level, size, budget) triple without creating anything

        Returns:
            ValidationResult with the failing check's message, or a
            confirmation when valid
        """
        return validate_project_size(level, size, budget, self.policy)

    # ==================================================================
    # Projects
    # ==================================================================

    @track_command_duration("create_project")
    def create_project(
        self,
        data: CreateProject | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> Project:
        """
        Create a project in PLANNING status

        Args:
            data: CreateProject command or equivalent dict
            command_id: Idempotency key; repeating it returns the same project
            actor_id: Who issued the command

        Returns:
            The new project (status PLANNING, spentAmount 0, progress 0)

        Raises:
            Unauthorized: Level may not create the size
            OutOfRange: Budget outside the size's range
            InvalidDateRange: endDate before startDate
        """
        command = _coerce(CreateProject, data)
        events = self._execute(
            "create_project",
            lambda cid: self.project_handlers.handle_create_project(command, cid, actor_id),
            command_id,
            actor_id,
            created_by=command.created_by.value,
            size=command.size.value,
            budget=command.budget,
        )
        return self.get_project(events[0].entity_id)

    @track_command_duration("import_project")
    def import_project(
        self,
        data: ImportProject | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = "system",
    ) -> Project:
        """Load an existing project with its id, status, progress and spending"""
        command = _coerce(ImportProject, data)
        events = self._execute(
            "import_project",
            lambda cid: self.project_handlers.handle_import_project(
                command, cid, actor_id, self.project_registry
            ),
            command_id,
            actor_id,
            project_id=command.id,
        )
        return self.get_project(events[0].entity_id)

    @track_command_duration("update_project")
    def update_project(
        self,
        project_id: str,
        updates: ProjectUpdate | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> Project:
        """
        Merge a partial set of fields into a project

        Args:
            project_id: Project to update
            updates: Fields to change (id, createdBy and spentAmount refused)

        Returns:
            The updated project

        Raises:
            ImmutableField: updates names a system-managed field
            ProjectNotFound: No such project
            InvalidStatusTransition: Status change outside the lifecycle
            ProjectClosed / ProgressRegression: Project closed, or progress would go down
            Unauthorized / OutOfRange / BudgetBelowSpending: Budget or size change invalid
            InvalidDateRange: Dates out of order after the update
        """
        if not isinstance(updates, ProjectUpdate):
            validate_mutable_fields(updates)
        command = UpdateProject(
            project_id=project_id, update=_coerce(ProjectUpdate, updates)
        )
        self._execute(
            "update_project",
            lambda cid: self.project_handlers.handle_update_project(
                command, cid, actor_id, self.project_registry
            ),
            command_id,
            actor_id,
            project_id=project_id,
            fields=sorted(command.update.model_fields_set),
        )
        return self.get_project(project_id)

    def get_project(self, project_id: str) -> Project | None:
        with self._lock:
            return self.project_registry.get(project_id)

    def get_projects(
        self, filters: ProjectFilters | dict[str, Any] | None = None
    ) -> list[Project]:
        """
        List projects in insertion order

        Args:
            filters: Any of status, province, size, priority (ANDed)
        """
        with self._lock:
            return self.project_registry.list_projects(
                _coerce(ProjectFilters, filters or {})
            )

    # ==================================================================
    # Allocations
    # ==================================================================

    @track_command_duration("allocate_budget")
    def allocate_budget(
        self,
        data: AllocateBudget | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> BudgetAllocation:
        """
        Allocate budget from the national pool

        The remaining-balance check and the increment of allocatedBudget
        happen under the engine lock, so concurrent allocations cannot
        jointly overdraw the pool.

        Raises:
            InsufficientFunds: amount > totalBudget - allocatedBudget
        """
        command = _coerce(AllocateBudget, data)
        events = self._execute(
            "allocate_budget",
            lambda cid: self.allocation_handlers.handle_allocate_budget(
                command, cid, actor_id, self.national_totals
            ),
            command_id,
            actor_id,
            on_applied=lambda _: allocations_total.labels(
                recipient_type=command.recipient_type.value
            ).inc(),
            recipient=command.recipient,
            amount=command.amount,
        )
        allocation = self.get_allocation(events[0].payload["allocation"]["id"])
        self._refresh_budget_metrics()
        return allocation

    @track_command_duration("import_allocation")
    def import_allocation(
        self,
        data: ImportAllocation | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = "system",
    ) -> BudgetAllocation:
        """Record an allocation already included in the opening totals"""
        command = _coerce(ImportAllocation, data)
        self._execute(
            "import_allocation",
            lambda cid: self.allocation_handlers.handle_import_allocation(
                command, cid, actor_id, self.allocation_ledger, self.national_totals
            ),
            command_id,
            actor_id,
            allocation_id=command.id,
        )
        return self.get_allocation(command.id)

    def get_allocation(self, allocation_id: str) -> BudgetAllocation | None:
        with self._lock:
            return self.allocation_ledger.get(allocation_id)

    def get_allocations(
        self, filters: AllocationFilters | dict[str, Any] | None = None
    ) -> list[BudgetAllocation]:
        """List allocations, optionally by recipientType and fiscalYear"""
        with self._lock:
            return self.allocation_ledger.list_allocations(
                _coerce(AllocationFilters, filters or {})
            )

    # ==================================================================
    # Policy decisions
    # ==================================================================

    @track_command_duration("propose_policy")
    def propose_policy(
        self,
        data: ProposePolicy | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> PolicyDecision:
        command = _coerce(ProposePolicy, data)
        events = self._execute(
            "propose_policy",
            lambda cid: self.decision_handlers.handle_propose_policy(command, cid, actor_id),
            command_id,
            actor_id,
            title=command.title,
        )
        return self.get_policy(events[0].entity_id)

    @track_command_duration("import_policy")
    def import_policy(
        self,
        data: ImportPolicy | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = "system",
    ) -> PolicyDecision:
        command = _coerce(ImportPolicy, data)
        self._execute(
            "import_policy",
            lambda cid: self.decision_handlers.handle_import_policy(
                command, cid, actor_id, self.policy_registry
            ),
            command_id,
            actor_id,
            policy_id=command.id,
        )
        return self.get_policy(command.id)

    @track_command_duration("decide_policy")
    def decide_policy(
        self,
        policy_id: str,
        status: PolicyStatus | str,
        decided_by: str,
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> PolicyDecision:
        """
        Approve or reject a PENDING policy

        Raises:
            PolicyNotFound: No such policy
            AlreadyDecided: Policy already APPROVED or REJECTED
        """
        command = DecidePolicy(
            policy_id=policy_id,
            status=getattr(status, "value", status),
            decided_by=decided_by,
        )
        self._execute(
            "decide_policy",
            lambda cid: self.decision_handlers.handle_decide_policy(
                command, cid, actor_id or decided_by, self.policy_registry
            ),
            command_id,
            actor_id or decided_by,
            policy_id=policy_id,
            status=command.status,
        )
        return self.get_policy(policy_id)

    def get_policy(self, policy_id: str) -> PolicyDecision | None:
        with self._lock:
            return self.policy_registry.get(policy_id)

    def get_policies(self, status: PolicyStatus | str | None = None) -> list[PolicyDecision]:
        with self._lock:
            return self.policy_registry.list_policies(status)

    # ==================================================================
    # Payments
    # ==================================================================

    @track_command_duration("submit_payment_request")
    def submit_payment_request(
        self,
        data: SubmitPaymentRequest | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> PaymentRequest:
        """
        Raise a PENDING payment request against an existing project

        Raises:
            ProjectNotFound: No such project
        """
        command = _coerce(SubmitPaymentRequest, data)
        events = self._execute(
            "submit_payment_request",
            lambda cid: self.payment_handlers.handle_submit_payment_request(
                command, cid, actor_id, self.project_registry
            ),
            command_id,
            actor_id,
            project_id=command.project_id,
            amount=command.amount,
        )
        return self.get_payment_request(events[0].entity_id)

    @track_command_duration("import_payment_request")
    def import_payment_request(
        self,
        data: ImportPaymentRequest | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = "system",
    ) -> PaymentRequest:
        command = _coerce(ImportPaymentRequest, data)
        self._execute(
            "import_payment_request",
            lambda cid: self.payment_handlers.handle_import_payment_request(
                command, cid, actor_id, self.payment_ledger, self.project_registry
            ),
            command_id,
            actor_id,
            payment_id=command.id,
        )
        return self.get_payment_request(command.id)

    @track_command_duration("process_payment")
    def process_payment(
        self,
        payment_id: str,
        status: PaymentStatus | str,
        approved_by: str,
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> PaymentRequest:
        """
        Approve or reject a PENDING payment request

        Approval debits the project's spentAmount and the national
        spentBudget in one event; the request can be settled only once.

        Raises:
            PaymentNotFound: No such request
            AlreadyProcessed: Request no longer PENDING
            ProjectNotFound: Approval against a missing project (REJECT policy)
            OverBudget: Approval would break an enforced spending cap
        """
        command = ProcessPayment(
            payment_id=payment_id,
            status=getattr(status, "value", status),
            approved_by=approved_by,
        )
        self._execute(
            "process_payment",
            lambda cid: self.payment_handlers.handle_process_payment(
                command,
                cid,
                actor_id or approved_by,
                self.payment_ledger,
                self.project_registry,
                self.national_totals,
            ),
            command_id,
            actor_id or approved_by,
            on_applied=lambda _: payments_processed_total.labels(status=command.status).inc(),
            payment_id=payment_id,
            status=command.status,
        )
        self._refresh_budget_metrics()
        return self.get_payment_request(payment_id)

    def get_payment_request(self, payment_id: str) -> PaymentRequest | None:
        with self._lock:
            return self.payment_ledger.get(payment_id)

    def get_payment_requests(
        self, status: PaymentStatus | str | None = None
    ) -> list[PaymentRequest]:
        with self._lock:
            return self.payment_ledger.list_payments(status)

    # ==================================================================
    # Directory
    # ==================================================================

    @track_command_duration("register_contractor")
    def register_contractor(
        self,
        data: RegisterContractor | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> Contractor:
        command = _coerce(RegisterContractor, data)
        events = self._execute(
            "register_contractor",
            lambda cid: self.directory_handlers.handle_register_contractor(
                command, cid, actor_id, self.contractor_directory
            ),
            command_id,
            actor_id,
            company=command.company,
        )
        return self.get_contractor(events[0].entity_id)

    def get_contractor(self, contractor_id: str) -> Contractor | None:
        with self._lock:
            return self.contractor_directory.get(contractor_id)

    def get_contractors(
        self, filters: ContractorFilters | dict[str, Any] | None = None
    ) -> list[Contractor]:
        """List contractors by verified flag and specialization substring"""
        with self._lock:
            return self.contractor_directory.list_contractors(
                _coerce(ContractorFilters, filters or {})
            )

    def get_contractor_projects(self, contractor_id: str) -> list[Project]:
        """
        Projects whose assigned contractor has this id

        Raises:
            ContractorNotFound: No such contractor in the directory
        """
        with self._lock:
            if not self.contractor_directory.exists(contractor_id):
                raise ContractorNotFound(contractor_id)
            return [
                project
                for project in self.project_registry.list_projects()
                if project.contractor is not None and project.contractor.id == contractor_id
            ]

    @track_command_duration("file_quality_report")
    def file_quality_report(
        self,
        data: FileQualityReport | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = None,
    ) -> QualityReport:
        """
        Raises:
            ProjectNotFound: The inspected project doesn't exist
        """
        command = _coerce(FileQualityReport, data)
        events = self._execute(
            "file_quality_report",
            lambda cid: self.directory_handlers.handle_file_quality_report(
                command, cid, actor_id, self.quality_reports, self.project_registry
            ),
            command_id,
            actor_id,
            project_id=command.project_id,
        )
        report_id = events[0].entity_id
        with self._lock:
            return next(
                report
                for report in self.quality_reports.list_reports(command.project_id)
                if report.id == report_id
            )

    def get_quality_reports(self, project_id: str | None = None) -> list[QualityReport]:
        with self._lock:
            return self.quality_reports.list_reports(project_id)

    @track_command_duration("record_province_stats")
    def record_province_stats(
        self,
        data: RecordProvinceStats | dict[str, Any],
        command_id: str | None = None,
        actor_id: str | None = "system",
    ) -> ProvinceStats:
        command = _coerce(RecordProvinceStats, data)
        self._execute(
            "record_province_stats",
            lambda cid: self.directory_handlers.handle_record_province_stats(
                command, cid, actor_id, self.province_stats
            ),
            command_id,
            actor_id,
            province=command.name,
        )
        with self._lock:
            return next(
                stats
                for stats in self.province_stats.list_provinces()
                if stats.name == command.name
            )

    def get_province_stats(self) -> list[ProvinceStats]:
        with self._lock:
            return self.province_stats.list_provinces()

    # ==================================================================
    # Audit
    # ==================================================================

    def get_events(self, stream_type: str | None = None) -> list[Event]:
        """Events in append order, optionally for one stream type"""
        if stream_type is None:
            return self.event_store.load_all_events()
        return self.event_store.query_events(stream_type=stream_type)


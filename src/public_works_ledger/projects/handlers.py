"""
Project Module Handlers - Command→Event transformation

Handlers are the decision-making layer. They:
1. Load current state (from the project registry)
2. Validate invariants (validation engine, dates, lifecycle)
3. Generate events if valid
4. Return events for append to event store

Nothing is produced when a check fails; the raised error reaches the caller.
"""

from public_works_ledger.kernel.errors import DuplicateId, ProjectNotFound
from public_works_ledger.kernel.events import Event, create_event, stream_id_for
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.kernel.ids import IdFactory, generate_id
from public_works_ledger.kernel.time import TimeProvider
from public_works_ledger.projects.commands import (
    CreateProject,
    ImportProject,
    UpdateProject,
)
from public_works_ledger.projects.events import (
    ProjectCreated,
    ProjectImported,
    ProjectUpdated,
)
from public_works_ledger.projects.invariants import validate_project_update
from public_works_ledger.projects.models import Project
from public_works_ledger.projects.projections import ProjectRegistry
from public_works_ledger.rules.invariants import (
    require_valid_project_size,
    validate_date_range,
)


class ProjectCommandHandlers:
    """
    Command handlers for the project module

    Handlers convert commands into events. They depend on the project
    registry for current state.
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        policy: GovernancePolicy,
        id_factory: IdFactory,
    ) -> None:
        """
        Initialize handlers with dependencies

        Args:
            time_provider: For timestamps (injectable for testing)
            policy: Budget range table and authorization matrix
            id_factory: Assigns project ids
        """
        self.time_provider = time_provider
        self.policy = policy
        self.id_factory = id_factory

    def handle_create_project(
        self,
        command: CreateProject,
        command_id: str,
        actor_id: str | None,
    ) -> list[Event]:
        """
        Handle CreateProject command

        Validates:
        - created_by may create projects of this size
        - budget inside the size's range
        - end_date not before start_date

        Returns:
            List of events to append

        Raises:
            Unauthorized: Size not permitted for the level
            OutOfRange: Budget outside the range for the size
            InvalidDateRange: end_date before start_date
        """
        now = self.time_provider.now()

        require_valid_project_size(
            command.created_by, command.size, command.budget, self.policy
        )
        validate_date_range(command.start_date, command.end_date)

        project = Project(id=self.id_factory.generate(), **command.model_dump())

        event_payload = ProjectCreated(
            project=project,
            created_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("project", project.id),
            stream_type="project",
            event_type="ProjectCreated",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=1,
        )

        return [event]

    def handle_import_project(
        self,
        command: ImportProject,
        command_id: str,
        actor_id: str | None,
        registry: ProjectRegistry,
    ) -> list[Event]:
        """
        Handle ImportProject command

        Same checks as creation, plus the id must be unused.

        Raises:
            DuplicateId: A project with this id already exists
        """
        now = self.time_provider.now()

        if registry.exists(command.id):
            raise DuplicateId("Project", command.id)

        require_valid_project_size(
            command.created_by, command.size, command.budget, self.policy
        )
        validate_date_range(command.start_date, command.end_date)

        project = Project(**command.model_dump())

        event_payload = ProjectImported(
            project=project,
            imported_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("project", project.id),
            stream_type="project",
            event_type="ProjectImported",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=1,
        )

        return [event]

    def handle_update_project(
        self,
        command: UpdateProject,
        command_id: str,
        actor_id: str | None,
        registry: ProjectRegistry,
    ) -> list[Event]:
        """
        Handle UpdateProject command

        Merges the given fields into the stored project after re-validating
        whatever the update touches.

        Raises:
            ProjectNotFound: If project doesn't exist
            InvalidStatusTransition: Status change not in the lifecycle
            ProjectClosed: Project is COMPLETED or CANCELLED
            ProgressRegression: Progress would go down
            Unauthorized / OutOfRange: New size or budget fails validation
            BudgetBelowSpending: New budget below what is already spent
            InvalidDateRange: New dates out of order
        """
        now = self.time_provider.now()

        project = registry.get(command.project_id)
        if project is None:
            raise ProjectNotFound(command.project_id)

        updated = validate_project_update(project, command.update, self.policy)

        event_payload = ProjectUpdated(
            project_id=project.id,
            changes=command.update.changes(),
            previous_status=project.status.value,
            new_status=updated.status.value,
            updated_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("project", project.id),
            stream_type="project",
            event_type="ProjectUpdated",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=registry.version(project.id) + 1,
        )

        return [event]

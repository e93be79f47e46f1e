"""
Project Module Projections - Read model for project queries

ProjectRegistry: current state of every project, in insertion order.

Stored state is plain JSON-form dicts (as carried in event payloads); queries
return fresh Project models so callers never hold a reference into the
projection.
"""

from public_works_ledger.kernel.events import Event
from public_works_ledger.projects.commands import ProjectFilters
from public_works_ledger.projects.models import Project


class ProjectRegistry:
    """
    Main project projection - current state of all projects

    Built from events: ProjectCreated, ProjectImported, ProjectUpdated,
                       PaymentApproved (spending debit)

    Query methods: get, exists, list_projects, version, count
    """

    def __init__(self) -> None:
        self.projects: dict[str, dict] = {}
        self.versions: dict[str, int] = {}

    def apply_event(self, event: Event) -> None:
        """
        Apply an event to update the projection

        Args:
            event: Event to apply
        """
        if event.event_type in ("ProjectCreated", "ProjectImported"):
            self._apply_project_added(event)
        elif event.event_type == "ProjectUpdated":
            self._apply_project_updated(event)
        elif event.event_type == "PaymentApproved":
            self._apply_payment_approved(event)

    def _apply_project_added(self, event: Event) -> None:
        project = dict(event.payload["project"])
        self.projects[project["id"]] = project
        self.versions[project["id"]] = event.version

    def _apply_project_updated(self, event: Event) -> None:
        payload = event.payload
        project_id = payload["project_id"]

        if project_id in self.projects:
            self.projects[project_id].update(payload["changes"])
            self.versions[project_id] = event.version

    def _apply_payment_approved(self, event: Event) -> None:
        """Debit a settled payment; the event lives on the payment stream, so no version bump"""
        payload = event.payload
        project_id = payload["project_id"]

        if payload.get("debit_applied") and project_id in self.projects:
            self.projects[project_id]["spent_amount"] += event.amount

    def get(self, project_id: str) -> Project | None:
        data = self.projects.get(project_id)
        return Project.model_validate(data) if data is not None else None

    def exists(self, project_id: str) -> bool:
        return project_id in self.projects

    def version(self, project_id: str) -> int:
        return self.versions.get(project_id, 0)

    def list_projects(self, filters: ProjectFilters | None = None) -> list[Project]:
        """
        List projects in the order they entered the registry

        Args:
            filters: Optional status/province/size/priority filters, ANDed

        Returns:
            Matching projects
        """
        filters = filters or ProjectFilters()
        wanted = filters.model_dump(mode="json", exclude_none=True)

        return [
            Project.model_validate(data)
            for data in self.projects.values()
            if all(data.get(field) == value for field, value in wanted.items())
        ]

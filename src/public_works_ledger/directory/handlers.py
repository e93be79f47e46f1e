"""
Directory Handlers - Command→Event transformation for reference data
"""

from public_works_ledger.directory.commands import (
    FileQualityReport,
    RecordProvinceStats,
    RegisterContractor,
)
from public_works_ledger.directory.events import (
    ContractorRegistered,
    ProvinceStatsRecorded,
    QualityReportFiled,
)
from public_works_ledger.directory.models import Contractor, ProvinceStats, QualityReport
from public_works_ledger.directory.projections import (
    ContractorDirectory,
    ProvinceStatsTable,
    QualityReportLog,
)
from public_works_ledger.kernel.errors import DuplicateId, ProjectNotFound
from public_works_ledger.kernel.events import Event, create_event, stream_id_for
from public_works_ledger.kernel.ids import IdFactory, generate_id
from public_works_ledger.kernel.time import TimeProvider, today
from public_works_ledger.projects.projections import ProjectRegistry


def province_stream_id(name: str) -> str:
    return stream_id_for("province", name.lower())


class DirectoryCommandHandlers:
    """Command handlers for contractors, quality reports and province stats"""

    def __init__(self, time_provider: TimeProvider, id_factory: IdFactory) -> None:
        self.time_provider = time_provider
        self.id_factory = id_factory

    def handle_register_contractor(
        self,
        command: RegisterContractor,
        command_id: str,
        actor_id: str | None,
        directory: ContractorDirectory,
    ) -> list[Event]:
        """
        Raises:
            DuplicateId: A contractor with the given id already exists
        """
        now = self.time_provider.now()

        if command.id is not None and directory.exists(command.id):
            raise DuplicateId("Contractor", command.id)

        contractor = Contractor(
            **command.model_dump(exclude={"id", "registered_date"}),
            id=command.id or self.id_factory.generate(),
            registered_date=command.registered_date or today(self.time_provider),
        )

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("contractor", contractor.id),
            stream_type="contractor",
            event_type="ContractorRegistered",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=ContractorRegistered(
                contractor=contractor, registered_at=now
            ).model_dump(mode="json"),
            version=1,
        )

        return [event]

    def handle_file_quality_report(
        self,
        command: FileQualityReport,
        command_id: str,
        actor_id: str | None,
        reports: QualityReportLog,
        projects: ProjectRegistry,
    ) -> list[Event]:
        """
        Raises:
            ProjectNotFound: If the inspected project doesn't exist
            DuplicateId: A report with the given id already exists
        """
        now = self.time_provider.now()

        project = projects.get(command.project_id)
        if project is None:
            raise ProjectNotFound(command.project_id)

        if command.id is not None and reports.exists(command.id):
            raise DuplicateId("Quality report", command.id)

        report = QualityReport(
            **command.model_dump(exclude={"id", "inspection_date"}),
            id=command.id or self.id_factory.generate(),
            project_name=project.title,
            inspection_date=command.inspection_date or today(self.time_provider),
        )

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("quality_report", report.id),
            stream_type="quality_report",
            event_type="QualityReportFiled",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=QualityReportFiled(report=report, filed_at=now).model_dump(mode="json"),
            version=1,
        )

        return [event]

    def handle_record_province_stats(
        self,
        command: RecordProvinceStats,
        command_id: str,
        actor_id: str | None,
        table: ProvinceStatsTable,
    ) -> list[Event]:
        now = self.time_provider.now()
        stream_id = province_stream_id(command.name)

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id,
            stream_type="province",
            event_type="ProvinceStatsRecorded",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=ProvinceStatsRecorded(
                stats=ProvinceStats(**command.model_dump()), recorded_at=now
            ).model_dump(mode="json"),
            version=table.version(stream_id) + 1,
        )

        return [event]

"""
Directory Projections

ContractorDirectory: registered contractors, in registration order
QualityReportLog: inspection reports, in filing order
ProvinceStatsTable: latest summary per province, in first-recorded order
"""

from public_works_ledger.directory.commands import ContractorFilters
from public_works_ledger.directory.models import Contractor, ProvinceStats, QualityReport
from public_works_ledger.kernel.events import Event


class ContractorDirectory:
    def __init__(self) -> None:
        self.contractors: dict[str, dict] = {}

    def apply_event(self, event: Event) -> None:
        if event.event_type == "ContractorRegistered":
            contractor = dict(event.payload["contractor"])
            self.contractors[contractor["id"]] = contractor

    def get(self, contractor_id: str) -> Contractor | None:
        data = self.contractors.get(contractor_id)
        return Contractor.model_validate(data) if data is not None else None

    def exists(self, contractor_id: str) -> bool:
        return contractor_id in self.contractors

    def list_contractors(self, filters: ContractorFilters | None = None) -> list[Contractor]:
        """
        List contractors matching the filters

        Args:
            filters: verified flag (exact) and specialization (substring,
                case-insensitive); both optional

        Returns:
            Matching contractors in registration order
        """
        filters = filters or ContractorFilters()
        needle = filters.specialization.lower() if filters.specialization else None

        results = []
        for data in self.contractors.values():
            if filters.verified is not None and data["verified"] != filters.verified:
                continue
            if needle and needle not in data["specialization"].lower():
                continue
            results.append(Contractor.model_validate(data))
        return results


class QualityReportLog:
    def __init__(self) -> None:
        self.reports: dict[str, dict] = {}

    def apply_event(self, event: Event) -> None:
        if event.event_type == "QualityReportFiled":
            report = dict(event.payload["report"])
            self.reports[report["id"]] = report

    def exists(self, report_id: str) -> bool:
        return report_id in self.reports

    def list_reports(self, project_id: str | None = None) -> list[QualityReport]:
        return [
            QualityReport.model_validate(data)
            for data in self.reports.values()
            if project_id is None or data["project_id"] == project_id
        ]


class ProvinceStatsTable:
    def __init__(self) -> None:
        self.provinces: dict[str, dict] = {}
        self.versions: dict[str, int] = {}

    def apply_event(self, event: Event) -> None:
        if event.event_type == "ProvinceStatsRecorded":
            stats = dict(event.payload["stats"])
            self.provinces[stats["name"]] = stats
            self.versions[event.stream_id] = event.version

    def version(self, stream_id: str) -> int:
        return self.versions.get(stream_id, 0)

    def list_provinces(self) -> list[ProvinceStats]:
        return [ProvinceStats.model_validate(data) for data in self.provinces.values()]

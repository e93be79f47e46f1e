"""
Demo data set

A small but realistic fiscal year: Rs. 150 billion national budget,
three flagship projects, three allocations, three policies, two pending
payment requests, three contractors, two quality reports and the seven
provinces. Everything is loaded through import commands, so the same rules
apply as for live data; the opening totals already include the seeded
allocations and spending.
"""

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from public_works_ledger.engine import GovernanceEngine

FISCAL_YEAR = "2080/81"

NATIONAL_TOTALS = {
    "total_budget": 150_000_000_000,
    "allocated_budget": 100_000_000_000,
    "spent_budget": 45_000_000_000,
    "total_projects": 1247,
    "completed_projects": 342,
    "ongoing_projects": 765,
    "delayed_projects": 140,
    "total_contractors": 523,
    "provinces": 7,
    "local_units": 753,
}

CONTRACTORS = [
    {
        "id": "c1",
        "name": "Ram Kumar Shrestha",
        "company": "Nepal Infrastructure Corp",
        "email": "ram@nepinfra.com",
        "phone": "+977-1-4444444",
        "rating": 4.5,
        "completed_projects": 15,
        "ongoing_projects": 3,
        "specialization": "Road Construction",
        "verified": True,
        "registered_date": date(2018, 1, 15),
    },
    {
        "id": "c2",
        "name": "Sita Devi Tamang",
        "company": "Himalayan Builders",
        "email": "sita@himalayan.com",
        "phone": "+977-1-5555555",
        "rating": 4.2,
        "completed_projects": 22,
        "ongoing_projects": 5,
        "specialization": "Building Construction",
        "verified": True,
        "registered_date": date(2015, 6, 20),
    },
    {
        "id": "c3",
        "name": "Hari Prasad Gautam",
        "company": "Nepal Construction Group",
        "email": "hari@ncg.com",
        "phone": "+977-1-6666666",
        "rating": 4.0,
        "completed_projects": 8,
        "ongoing_projects": 2,
        "specialization": "Water Supply",
        "verified": True,
        "registered_date": date(2020, 3, 10),
    },
]

PROJECTS = [
    {
        "id": "1",
        "title": "Kathmandu-Terai Fast Track",
        "description": "High-speed highway connecting Kathmandu to southern plains",
        "budget": 45_000_000_000,
        "size": "LARGE",
        "created_by": "CENTRAL",
        "spent_amount": 28_000_000_000,
        "status": "IN_PROGRESS",
        "priority": "HIGH",
        "province": "Bagmati",
        "local_unit": "Multiple Districts",
        "contractor": {
            "id": "c1",
            "name": "Ram Kumar Shrestha",
            "company": "Nepal Infrastructure Corp",
            "rating": 4.5,
        },
        "progress": 62,
        "start_date": date(2021, 1, 15),
        "end_date": date(2025, 12, 31),
    },
    {
        "id": "2",
        "title": "Pokhara International Airport",
        "description": "International airport development project",
        "budget": 25_000_000_000,
        "size": "LARGE",
        "created_by": "CENTRAL",
        "spent_amount": 25_000_000_000,
        "status": "COMPLETED",
        "priority": "HIGH",
        "province": "Gandaki",
        "local_unit": "Pokhara Metropolitan",
        "contractor": {
            "id": "c2",
            "name": "Sita Devi Tamang",
            "company": "China CAMC Engineering",
            "rating": 4.2,
        },
        "progress": 100,
        "start_date": date(2016, 4, 1),
        "end_date": date(2023, 1, 1),
    },
    {
        "id": "3",
        "title": "Melamchi Water Supply Phase 2",
        "description": "Expansion of Melamchi water supply to additional areas",
        "budget": 8_000_000_000,
        "size": "LARGE",
        "created_by": "CENTRAL",
        "spent_amount": 3_200_000_000,
        "status": "IN_PROGRESS",
        "priority": "HIGH",
        "province": "Bagmati",
        "local_unit": "Kathmandu Valley",
        "contractor": {
            "id": "c3",
            "name": "Hari Prasad Gautam",
            "company": "Sino Hydro Nepal",
            "rating": 4.0,
        },
        "progress": 40,
        "start_date": date(2022, 6, 1),
        "end_date": date(2026, 6, 1),
    },
]

ALLOCATIONS = [
    {
        "id": "1",
        "recipient": "Bagmati Province",
        "recipient_type": "PROVINCE",
        "amount": 50_000_000_000,
        "purpose": "Infrastructure Development",
        "fiscal_year": FISCAL_YEAR,
        "allocated_date": date(2023, 7, 16),
        "allocated_by": "admin",
    },
    {
        "id": "2",
        "recipient": "Kathmandu Metropolitan",
        "recipient_type": "LOCAL_UNIT",
        "amount": 5_000_000_000,
        "purpose": "Urban Development",
        "fiscal_year": FISCAL_YEAR,
        "allocated_date": date(2023, 7, 20),
        "allocated_by": "admin",
    },
    {
        "id": "3",
        "recipient": "Gandaki Province",
        "recipient_type": "PROVINCE",
        "amount": 25_000_000_000,
        "purpose": "Road Infrastructure",
        "fiscal_year": FISCAL_YEAR,
        "allocated_date": date(2023, 8, 1),
        "allocated_by": "admin",
    },
]

POLICIES = [
    {
        "id": "1",
        "title": "National Road Safety Policy 2080",
        "description": "Comprehensive policy for improving road safety standards across all infrastructure projects",
        "category": "INFRASTRUCTURE",
        "proposed_by": "Ministry of Infrastructure",
        "proposed_date": date(2023, 10, 15),
        "impact": "All road construction projects nationwide",
    },
    {
        "id": "2",
        "title": "Green Building Standards 2080",
        "description": "Mandatory environmental standards for all new government buildings",
        "category": "ENVIRONMENT",
        "proposed_by": "Ministry of Environment",
        "proposed_date": date(2023, 11, 1),
        "impact": "All government building projects",
    },
    {
        "id": "3",
        "title": "Digital Infrastructure Policy",
        "description": "Policy for mandatory digital systems in all infrastructure monitoring",
        "category": "TECHNOLOGY",
        "status": "APPROVED",
        "proposed_by": "Ministry of Communications",
        "proposed_date": date(2023, 9, 1),
        "impact": "All new infrastructure projects",
        "decided_by": "PM Office",
        "decided_date": date(2023, 10, 1),
    },
]

PAYMENT_REQUESTS = [
    {
        "id": "1",
        "project_id": "1",
        "requester": "Bagmati Province",
        "amount": 500_000_000,
        "purpose": "Phase 3 Construction Materials",
        "request_date": date(2024, 1, 10),
    },
    {
        "id": "2",
        "project_id": "3",
        "requester": "Kathmandu Metropolitan",
        "amount": 200_000_000,
        "purpose": "Pipeline Installation",
        "request_date": date(2024, 1, 15),
    },
]

QUALITY_REPORTS = [
    {
        "id": "qr1",
        "project_id": "1",
        "inspector_name": "Er. Krishna Sharma",
        "inspection_date": date(2024, 1, 5),
        "status": "PASSED",
        "findings": "Road base construction meets standards. Proper drainage systems installed.",
        "recommendations": "Continue monitoring during monsoon season.",
    },
    {
        "id": "qr2",
        "project_id": "3",
        "inspector_name": "Er. Maya Rai",
        "inspection_date": date(2024, 1, 8),
        "status": "NEEDS_IMPROVEMENT",
        "findings": "Some pipeline joints need reinforcement.",
        "recommendations": "Re-inspect joints before pressure testing.",
    },
]

PROVINCES = [
    ("Koshi", 156, 65, 42, 15_000_000_000, 9_750_000_000),
    ("Madhesh", 189, 58, 35, 18_000_000_000, 10_440_000_000),
    ("Bagmati", 245, 72, 48, 30_000_000_000, 21_600_000_000),
    ("Gandaki", 134, 61, 39, 12_000_000_000, 7_320_000_000),
    ("Lumbini", 178, 55, 32, 16_000_000_000, 8_800_000_000),
    ("Karnali", 98, 48, 28, 10_000_000_000, 4_800_000_000),
    ("Sudurpashchim", 112, 52, 31, 11_000_000_000, 5_720_000_000),
]


def load_demo_data(engine: "GovernanceEngine") -> None:
    """Load the demo data set into a fresh engine opened with NATIONAL_TOTALS"""
    for contractor in CONTRACTORS:
        engine.register_contractor(contractor, actor_id="system")
    for project in PROJECTS:
        engine.import_project(project)
    for allocation in ALLOCATIONS:
        engine.import_allocation(allocation)
    for policy in POLICIES:
        engine.import_policy(policy)
    for payment in PAYMENT_REQUESTS:
        engine.import_payment_request(payment)
    for report in QUALITY_REPORTS:
        engine.file_quality_report(report, actor_id="system")
    for name, projects, utilization, completion, budget, spent in PROVINCES:
        engine.record_province_stats(
            {
                "name": name,
                "projects": projects,
                "utilization": utilization,
                "completion": completion,
                "budget": budget,
                "spent": spent,
            }
        )

"""
Test Helper Functions - Builders for command payloads

Each builder returns a plain dict in the camelCase wire format accepted by
the engine; keyword overrides use the same camelCase keys.
"""

from typing import Any


def project_input(**overrides: Any) -> dict[str, Any]:
    """
    Builder for a valid CreateProject payload

    Defaults: a PROVINCIAL MEDIUM road project of Rs. 2 billion in Koshi.

    Example:
        >>> project_input(budget=50_000_000, size="SMALL")["size"]
        'SMALL'
    """
    data = {
        "title": "Biratnagar Ring Road",
        "description": "Four-lane ring road around Biratnagar",
        "budget": 2_000_000_000,
        "size": "MEDIUM",
        "createdBy": "PROVINCIAL",
        "priority": "HIGH",
        "province": "Koshi",
        "localUnit": "Biratnagar Metropolitan",
        "startDate": "2024-04-01",
        "endDate": "2026-03-31",
    }
    data.update(overrides)
    return data


def allocation_input(**overrides: Any) -> dict[str, Any]:
    """Builder for a valid AllocateBudget payload (Rs. 5 billion to Karnali)"""
    data = {
        "recipient": "Karnali Province",
        "recipientType": "PROVINCE",
        "amount": 5_000_000_000,
        "purpose": "Rural road network",
    }
    data.update(overrides)
    return data


def policy_input(**overrides: Any) -> dict[str, Any]:
    data = {
        "title": "Open Contracting Standard",
        "description": "Publish every public works contract",
        "category": "GOVERNANCE",
        "proposedBy": "Ministry of Finance",
        "impact": "All contracts above Rs. 10 Crore",
    }
    data.update(overrides)
    return data


def payment_input(project_id: str, **overrides: Any) -> dict[str, Any]:
    data = {
        "projectId": project_id,
        "requester": "Koshi Province",
        "amount": 100_000_000,
        "purpose": "First milestone",
    }
    data.update(overrides)
    return data

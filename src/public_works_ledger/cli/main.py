"""
Public Works Ledger CLI

Command-line interface over an in-memory ledger. Every invocation starts a
fresh engine, preloaded with the demo data set unless --empty is given.

Usage:
    pwl validate LOCAL MEDIUM 2000000000
    pwl sizes
    pwl stats --json
    pwl projects --status IN_PROGRESS --province Bagmati
    pwl analyze allocation --recipient "Karnali Province" --type PROVINCE --amount 5000000000 --purpose "Rural roads"
    pwl analyze contractor c1
    pwl serve --port 8080
"""

import json
from datetime import date
from typing import Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from public_works_ledger.advisory.service import AdvisoryService
from public_works_ledger.allocation.commands import AllocateBudget
from public_works_ledger.command_api import describe_validation_error
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.logging import configure_logging
from public_works_ledger.projects.commands import CreateProject
from public_works_ledger.rules.models import GovernmentLevel, ProjectSize, format_currency

# Configure logging to stderr (avoids polluting stdout for JSON output)
configure_logging(json_output=False, log_level="WARNING")

app = typer.Typer(
    name="pwl",
    help="Public Works Ledger - National public-works budget governance",
    add_completion=False,
)

# Sub-apps
analyze_app = typer.Typer(help="Advisory analyses (never change the ledger)")

app.add_typer(analyze_app, name="analyze")


def get_engine(empty: bool = False) -> GovernanceEngine:
    """Fresh engine, with the demo data set unless empty"""
    if empty:
        return GovernanceEngine()
    return GovernanceEngine.with_demo_data()


def echo_json(data: object) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


# Validation engine


@app.command()
def validate(
    level: Annotated[GovernmentLevel, typer.Argument(help="Government level")],
    size: Annotated[ProjectSize, typer.Argument(help="Project size")],
    budget: Annotated[int, typer.Argument(help="Budget in rupees")],
) -> None:
    """Check whether a level may create a project of this size and budget"""
    result = GovernanceEngine().validate_project_size(level, size, budget)
    if result.valid:
        typer.echo(f"✓ {result.message}")
    else:
        typer.echo(f"✗ {result.message}", err=True)
        raise typer.Exit(1)


@app.command()
def sizes() -> None:
    """Show the budget range table and the authorization matrix"""
    policy = GovernanceEngine().policy

    typer.echo("Budget ranges:")
    for size, budget_range in policy.budget_ranges.items():
        typer.echo(
            f"  {size.value:<7} {format_currency(budget_range.min)} - "
            f"{format_currency(budget_range.max)}"
        )

    typer.echo("\nAllowed sizes:")
    for level, allowed in policy.allowed_sizes.items():
        typer.echo(f"  {level.value:<11} {', '.join(s.value for s in allowed)}")


# Queries


@app.command()
def stats(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    empty: Annotated[
        bool,
        typer.Option("--empty", help="Start without the demo data set"),
    ] = False,
) -> None:
    """Show national budget totals"""
    totals = get_engine(empty).get_national_stats()

    if json_output:
        echo_json(totals.to_api())
        return

    typer.echo(f"Total budget:     {format_currency(totals.total_budget)}")
    typer.echo(f"Allocated:        {format_currency(totals.allocated_budget)}")
    typer.echo(f"Spent:            {format_currency(totals.spent_budget)}")
    typer.echo(f"Remaining:        {format_currency(totals.remaining_budget)}")
    typer.echo(
        f"Projects:         {totals.total_projects} "
        f"({totals.ongoing_projects} ongoing, {totals.completed_projects} completed, "
        f"{totals.delayed_projects} delayed)"
    )


@app.command()
def projects(
    status: Annotated[
        Optional[str],
        typer.Option("--status", help="Filter by status"),
    ] = None,
    province: Annotated[
        Optional[str],
        typer.Option("--province", help="Filter by province"),
    ] = None,
    size: Annotated[
        Optional[str],
        typer.Option("--size", help="Filter by size"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List projects"""
    filters = {"status": status, "province": province, "size": size}
    try:
        found = get_engine().get_projects(filters)
    except ValidationError as e:
        typer.echo(f"Error: {describe_validation_error(e)}", err=True)
        raise typer.Exit(1)

    if json_output:
        echo_json([project.to_api() for project in found])
        return

    typer.echo(f"Projects ({len(found)}):")
    for project in found:
        typer.echo(f"\n  {project.id}: {project.title}")
        typer.echo(f"    Status: {project.status.value} ({project.progress}%)")
        typer.echo(f"    Province: {project.province}")
        typer.echo(
            f"    Budget: {format_currency(project.budget)} "
            f"(spent {format_currency(project.spent_amount)})"
        )


# Advisory


@analyze_app.command("allocation")
def analyze_allocation(
    recipient: Annotated[str, typer.Option("--recipient", help="Recipient name")],
    recipient_type: Annotated[
        str, typer.Option("--type", help="PROVINCE, LOCAL_UNIT or MINISTRY")
    ],
    amount: Annotated[int, typer.Option("--amount", help="Amount in rupees")],
    purpose: Annotated[str, typer.Option("--purpose", help="Purpose of the allocation")],
) -> None:
    """Feasibility analysis of a proposed allocation"""
    try:
        command = AllocateBudget(
            recipient=recipient,
            recipient_type=recipient_type,
            amount=amount,
            purpose=purpose,
        )
    except ValidationError as e:
        typer.echo(f"Error: {describe_validation_error(e)}", err=True)
        raise typer.Exit(1)

    service = AdvisoryService()
    try:
        analysis = service.analyze_allocation(command)
    finally:
        service.close()
    echo_json(analysis.to_api())


@analyze_app.command("project")
def analyze_project(
    title: Annotated[str, typer.Option("--title", help="Project title")],
    budget: Annotated[int, typer.Option("--budget", help="Budget in rupees")],
    size: Annotated[ProjectSize, typer.Option("--size", help="Project size")],
    level: Annotated[
        GovernmentLevel, typer.Option("--level", help="Creating government level")
    ],
    province: Annotated[str, typer.Option("--province", help="Province")],
    local_unit: Annotated[str, typer.Option("--local-unit", help="Local unit")],
    start: Annotated[str, typer.Option("--start", help="Start date (YYYY-MM-DD)")],
    end: Annotated[str, typer.Option("--end", help="End date (YYYY-MM-DD)")],
    description: Annotated[
        str, typer.Option("--description", help="Project description")
    ] = "",
) -> None:
    """Feasibility review of a proposed project"""
    try:
        command = CreateProject(
            title=title,
            description=description,
            budget=budget,
            size=size,
            created_by=level,
            province=province,
            local_unit=local_unit,
            start_date=date.fromisoformat(start),
            end_date=date.fromisoformat(end),
        )
    except ValidationError as e:
        typer.echo(f"Error: {describe_validation_error(e)}", err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    service = AdvisoryService(policy=GovernanceEngine().policy)
    try:
        feasibility = service.analyze_project(command)
    finally:
        service.close()
    echo_json(feasibility.to_api())


@analyze_app.command("contractor")
def analyze_contractor(
    contractor_id: Annotated[str, typer.Argument(help="Contractor ID")],
) -> None:
    """Performance rating of a contractor from their assigned projects"""
    engine = get_engine()
    contractor = engine.get_contractor(contractor_id)
    if contractor is None:
        typer.echo(f"Error: Contractor not found: {contractor_id}", err=True)
        raise typer.Exit(1)

    service = AdvisoryService(policy=engine.policy)
    try:
        rating = service.rate_contractor(
            contractor, engine.get_contractor_projects(contractor_id)
        )
    finally:
        service.close()
    echo_json(rating.to_api())


# Server


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to listen on")] = 8080,
    host: Annotated[str, typer.Option(help="Interface to bind")] = "0.0.0.0",
    metrics_port: Annotated[
        Optional[int],
        typer.Option("--metrics-port", help="Also expose Prometheus metrics on this port"),
    ] = None,
    empty: Annotated[
        bool,
        typer.Option("--empty", help="Start without the demo data set"),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Output logs in JSON format (default: when ENVIRONMENT=production)"),
    ] = False,
) -> None:
    """Run the HTTP API"""
    from public_works_ledger.api.server import run_server
    from public_works_ledger.kernel.metrics import start_metrics_server

    configure_logging(json_output=json_logs or None, log_level="INFO")
    if metrics_port is not None:
        start_metrics_server(port=metrics_port)
    run_server(get_engine(empty), host=host, port=port)


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()

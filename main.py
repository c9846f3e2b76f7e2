#!/usr/bin/env python3
"""Plan Forge CLI - generate and browse pre-development project plans.

Usage:
    # Create tables
    python main.py init-db

    # Generate a plan and print it
    python main.py generate --title "AI Tool" --description "..." --problem "..."

    # Generate and store it (private, owned by alice)
    python main.py generate --title "AI Tool" ... --save --private --owner alice

    # Read a stored project
    python main.py show ai-tool --viewer alice
"""

import json
import sys
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from agents import GenerationFailure, InvalidResponse, PlannerAgent
from config import GenerationConfig, settings
from contracts.brief_contracts import ProjectBrief
from contracts.plan_contracts import PlanDocument
from orchestrator import ProjectNotFound, ProjectService
from persistence import (
    PersistFailure,
    ProjectPersister,
    ProjectStore,
    create_db_engine,
    create_session_factory,
    init_db,
)
from providers import list_providers as get_available_providers


console = Console()


def build_service(database_url: Optional[str] = None) -> ProjectService:
    """Wire planner, persister and store from settings."""
    store = ProjectStore(create_session_factory(create_db_engine(database_url)))
    return ProjectService(
        planner=PlannerAgent(GenerationConfig.from_settings()),
        persister=ProjectPersister(store),
        store=store,
    )


def print_plan(plan: PlanDocument) -> None:
    meta = plan.metadata
    console.print(Panel(plan.executive_summary, title="Executive Summary"))
    console.print(
        f"[dim]Confidence:[/dim] {meta.confidence_score:g}   "
        f"[dim]Depth:[/dim] {meta.analysis_depth.value}   "
        f"[dim]Timeline:[/dim] {plan.roadmap.adjusted_timeline_weeks:g} weeks"
    )
    for note in meta.adjustments_made:
        console.print(f"  [yellow]-[/yellow] {note}")

    console.print(f"\n[bold]Stack:[/bold] {plan.tech_stack.rationale}")

    risks = Table(title="Risks")
    risks.add_column("Severity")
    risks.add_column("Category")
    risks.add_column("Risk")
    for risk in plan.risks:
        risks.add_row(risk.severity.value, risk.category.value, risk.title)
    console.print(risks)

    features = Table(title="Key Features")
    features.add_column("Priority")
    features.add_column("Feature")
    features.add_column("Complexity")
    features.add_column("Days", justify="right")
    for feature in plan.key_features:
        features.add_row(
            feature.priority.value, feature.feature,
            feature.complexity.value, f"{feature.estimated_days:g}",
        )
    console.print(features)

    for phase in plan.roadmap.phases:
        console.print(f"[bold]{phase.name}[/bold] ({phase.duration})")


@click.group()
@click.option("--database-url", default=None, help="Override PLAN_FORGE_DATABASE_URL")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]):
    """Plan Forge - honest pre-development plans from a project brief."""
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url


@cli.command("init-db")
@click.pass_context
def init_db_command(ctx: click.Context):
    """Create database tables."""
    init_db(create_db_engine(ctx.obj["database_url"]))
    console.print("[green]Database ready.[/green]")


@cli.command()
@click.option("--title", "-t", required=True, help="Project name")
@click.option("--description", "-d", required=True, help="High-level overview")
@click.option("--problem", "-p", "problem_statement", required=True, help="Problem being solved")
@click.option("--target-users", type=int, default=None, help="Expected number of users")
@click.option("--team-size", type=int, default=None, help="Number of developers")
@click.option("--timeline-weeks", type=int, default=None, help="Desired timeline in weeks")
@click.option("--budget", "budget_range", default=None, help="Budget range tag, e.g. 0-5k")
@click.option("--save", is_flag=True, help="Store the project and print its slug")
@click.option("--private", is_flag=True, help="Only the owner may read the stored project")
@click.option("--owner", default=None, help="Owner id; omitted means a guest project")
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_context
def generate(ctx: click.Context, save: bool, private: bool, owner: Optional[str], as_json: bool, **fields):
    """Generate a plan for a project brief."""
    try:
        brief = ProjectBrief(is_public=not private, **fields)
    except ValidationError as e:
        console.print(f"[red]Invalid brief:[/red]\n{e}")
        sys.exit(2)

    service = build_service(ctx.obj["database_url"])
    console.print(f"[dim]Model:[/dim] {settings.model or '(not set)'}  [dim]Provider:[/dim] {settings.provider}")

    try:
        with console.status("Generating plan..."):
            if save:
                project = service.create_project(brief, owner_id=owner)
                plan = project.plan
            else:
                project = None
                plan = service.planner.generate(brief)
    except InvalidResponse as e:
        console.print(f"[red]The model returned an unusable plan:[/red] {e.parse_failure}")
        sys.exit(1)
    except GenerationFailure as e:
        console.print(f"[red]Generation failed ({e.kind}):[/red] {e.message}")
        if e.operator_fixable:
            console.print("[dim]Check PLAN_FORGE_MODEL / PLAN_FORGE_API_KEY and your account.[/dim]")
        elif e.retryable_later:
            console.print("[dim]Try again later.[/dim]")
        sys.exit(1)
    except PersistFailure as e:
        console.print(f"[red]Could not save project:[/red] {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(plan.to_wire(), indent=2))
    else:
        print_plan(plan)

    usage = service.planner.total_usage
    console.print(
        f"\n[dim]Tokens:[/dim] {usage.input_tokens:,} in / {usage.output_tokens:,} out"
        f"   [dim]Cost:[/dim] ${usage.cost:.4f}"
    )
    if project is not None:
        console.print(f"[green]Saved as[/green] {project.slug}")
        if project.expires_at:
            console.print(f"[dim]Guest project, expires {project.expires_at:%Y-%m-%d %H:%M} UTC[/dim]")


@cli.command()
@click.argument("slug")
@click.option("--viewer", default=None, help="Viewer id; omitted means anonymous")
@click.pass_context
def show(ctx: click.Context, slug: str, viewer: Optional[str]):
    """Show a stored project (counts as a view)."""
    service = build_service(ctx.obj["database_url"])
    try:
        project = service.view_project(slug, viewer_id=viewer)
    except ProjectNotFound:
        console.print(f"[red]Project not found:[/red] {slug}")
        sys.exit(1)

    console.print(Panel.fit(
        f"[bold]{project.title}[/bold]\n{project.description}",
        subtitle=f"{project.view_count} views, {project.fork_count} forks",
    ))
    print_plan(project.plan)


@cli.command("list")
@click.option("--owner", default=None, help="List this owner's projects instead of public ones")
@click.option("--limit", default=20, show_default=True)
@click.pass_context
def list_command(ctx: click.Context, owner: Optional[str], limit: int):
    """List projects, newest first."""
    service = build_service(ctx.obj["database_url"])
    if owner:
        projects = service.list_owner_projects(owner, limit=limit)
    else:
        projects = service.list_public_projects(limit=limit)

    table = Table()
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Views", justify="right")
    table.add_column("Forks", justify="right")
    table.add_column("Visibility")
    for project in projects:
        table.add_row(
            project.slug, project.title, str(project.view_count),
            str(project.fork_count), "public" if project.is_public else "private",
        )
    console.print(table)


@cli.command()
def providers():
    """List LLM providers and whether they are usable with current settings."""
    console.print("[bold]Available LLM Providers:[/bold]\n")
    for name, available in get_available_providers(GenerationConfig.from_settings()).items():
        status = "[green]available[/green]" if available else "[red]not configured[/red]"
        console.print(f"  {name:12} {status}")
    console.print("\n[dim]Configure via PLAN_FORGE_PROVIDER, PLAN_FORGE_MODEL, PLAN_FORGE_API_KEY[/dim]")


if __name__ == "__main__":
    cli()

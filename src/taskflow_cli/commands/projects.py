"""Project management commands."""

from datetime import datetime

import typer

from taskflow_cli.services.reconciler import ReconcileOutcome
from taskflow_cli.services.workspace import open_workspace
from taskflow_cli.utils.typer_helpers import SuggestingGroup
from taskflow_cli.utils.ui.formatters import (
    format_info,
    format_output,
    format_project_detail,
    format_projects_table,
    format_skipped_projects,
    format_success,
    format_warning,
    resolve_output_format,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Project management commands")

OUTPUT_HELP = "Output format (table, json, yaml); defaults to output.format"


@app.command("list")
@command_wrapper
async def list_projects(
    output: str | None = typer.Option(None, "--output", "-o", help=OUTPUT_HELP),
) -> None:
    """List projects with their progress."""
    output = resolve_output_format(output)
    async with open_workspace() as ws:
        await ws.projects.refresh()
        projects = ws.reconciler.projects()
        skipped = ws.reconciler.skipped_projects

    if output in ("json", "yaml"):
        format_output(
            {
                "projects": [p.model_dump(mode="json", exclude={"tasks"}) for p in projects],
                "skipped_projects": [p.model_dump(mode="json") for p in skipped],
            },
            output,
        )
        return
    format_projects_table(projects)
    format_skipped_projects(skipped)


@app.command("show")
@command_wrapper
async def show_project(
    project_id: int = typer.Argument(..., help="Project ID"),
    check_server: bool = typer.Option(
        False, "--check-server", help="Compare local progress with the server's figures"
    ),
    output: str | None = typer.Option(None, "--output", "-o", help=OUTPUT_HELP),
) -> None:
    """Show a project with its tasks and progress."""
    output = resolve_output_format(output)
    async with open_workspace() as ws:
        detail = await ws.projects.open_project(project_id)
        server = await ws.projects.get_progress(project_id) if check_server else None

    if output in ("json", "yaml"):
        format_output(detail.model_dump(mode="json"), output)
        return

    format_project_detail(detail, datetime.now())
    if server is not None:
        if round(server.progress_percentage) == detail.stats.progress_percentage and (
            server.completed_tasks,
            server.total_tasks,
        ) == (detail.stats.completed_tasks, detail.stats.total_tasks):
            format_info("Server progress matches")
        else:
            format_warning(
                f"Server reports {server.completed_tasks}/{server.total_tasks} "
                f"({server.progress_percentage:.0f}%)"
            )


@app.command("create")
@command_wrapper
async def create_project(
    title: str = typer.Option(..., "--title", "-t", help="Project title"),
    description: str = typer.Option("", "--description", "-d", help="Project description"),
) -> None:
    """Create a new project."""
    async with open_workspace() as ws:
        await ws.projects.refresh()
        result = await ws.projects.create_project(title, description)
        projects = ws.reconciler.projects()

    format_success(f"Project created: {result.entity.title} (#{result.entity.id})")
    format_projects_table(projects)


@app.command("update")
@command_wrapper
async def update_project(
    project_id: int = typer.Argument(..., help="Project ID"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="New description"
    ),
) -> None:
    """Update a project's title or description."""
    async with open_workspace() as ws:
        current = await ws.projects.open_project(project_id)
        result = await ws.projects.update_project(
            project_id,
            title if title is not None else current.project.title,
            description if description is not None else current.project.description,
        )
        detail = ws.reconciler.get(project_id)

    format_success(f"Project updated: {result.entity.title}")
    if detail is not None:
        format_project_detail(detail, datetime.now())


@app.command("delete")
@command_wrapper
async def delete_project(
    project_id: int = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a project and all of its tasks."""
    async with open_workspace() as ws:
        current = await ws.projects.open_project(project_id)
        if not yes:
            typer.confirm(
                f"Delete '{current.project.title}' and its "
                f"{current.stats.total_tasks} task(s)?",
                abort=True,
            )
        outcome = await ws.projects.delete_project(project_id)
        if outcome is ReconcileOutcome.NAVIGATE_AWAY:
            await ws.projects.refresh()
            projects = ws.reconciler.projects()
        else:
            projects = None

    format_success(f"Project deleted: {current.project.title}")
    if projects is not None:
        format_projects_table(projects)

"""Task management commands.

Task commands work inside one project: the project is loaded first, the
change is sent to the API, and the returned task is folded into the loaded
view so the printed progress reflects the change without another fetch.
"""

from datetime import date, datetime

import typer

from taskflow_cli.models import ProjectWithStats
from taskflow_cli.services.reconciler import ReconcileOutcome
from taskflow_cli.services.workspace import Workspace, open_workspace
from taskflow_cli.utils import exit_codes
from taskflow_cli.utils.typer_helpers import SuggestingGroup
from taskflow_cli.utils.ui.formatters import (
    format_output,
    format_project_detail,
    format_success,
    format_task_list,
    format_warning,
    resolve_output_format,
)

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")

PROJECT_HELP = "Project the task belongs to"


def _parse_due(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise AppError(
            f"Invalid due date '{value}', expected YYYY-MM-DD",
            exit_codes.ERROR_INVALID_ARGS,
        ) from e


async def _settle(ws: Workspace, project_id: int, outcome: ReconcileOutcome) -> ProjectWithStats:
    """Return the project's view, reloading it when the change could not be applied."""
    if outcome is ReconcileOutcome.RELOAD_REQUIRED:
        format_warning("Local view was out of date; reloading project")
        return await ws.projects.open_project(project_id)
    detail = ws.reconciler.get(project_id)
    if detail is None:
        return await ws.projects.open_project(project_id)
    return detail


@app.command("list")
@command_wrapper
async def list_tasks(
    project_id: int = typer.Argument(..., help="Project ID"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output format (table, json, yaml); defaults to output.format"
    ),
) -> None:
    """List the tasks of a project, pending first."""
    output = resolve_output_format(output)
    async with open_workspace() as ws:
        detail = await ws.projects.open_project(project_id)

    if output in ("json", "yaml"):
        format_output({"tasks": [t.model_dump(mode="json") for t in detail.tasks]}, output)
        return
    format_task_list(detail.tasks, datetime.now())


@app.command("add")
@command_wrapper
async def add_task(
    project_id: int = typer.Argument(..., help="Project ID"),
    title: str = typer.Option(..., "--title", "-t", help="Task title"),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
) -> None:
    """Add a task to a project."""
    due_date = _parse_due(due)
    async with open_workspace() as ws:
        await ws.projects.open_project(project_id)
        result = await ws.tasks.create_task(
            project_id, title, description=description, due_date=due_date
        )
        detail = await _settle(ws, project_id, result.outcome)

    format_success(f"Task created: {result.entity.title} (#{result.entity.id})")
    format_project_detail(detail, datetime.now())


@app.command("toggle")
@command_wrapper
async def toggle_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    project_id: int = typer.Option(..., "--project", "-p", help=PROJECT_HELP),
) -> None:
    """Mark a task completed, or pending again."""
    async with open_workspace() as ws:
        await ws.projects.open_project(project_id)
        result = await ws.tasks.toggle_task(task_id)
        detail = await _settle(ws, result.entity.project_id, result.outcome)

    state = "completed" if result.entity.is_completed else "reopened"
    format_success(f"Task {state}: {result.entity.title}")
    format_project_detail(detail, datetime.now())


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    project_id: int = typer.Option(..., "--project", "-p", help=PROJECT_HELP),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="New description"),
    due: str | None = typer.Option(None, "--due", help="New due date (YYYY-MM-DD)"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
) -> None:
    """Edit a task's title, description or due date."""
    due_date = _parse_due(due)
    async with open_workspace() as ws:
        await ws.projects.open_project(project_id)
        current = ws.reconciler.find_task(task_id)
        if current is None:
            raise AppError(
                f"Task {task_id} is not in project {project_id}",
                exit_codes.ERROR_NOT_FOUND,
            )
        if clear_due:
            due_date = None
        elif due_date is None:
            due_date = current.due_date

        result = await ws.tasks.update_task(
            task_id,
            title if title is not None else current.title,
            description=description if description is not None else current.description,
            due_date=due_date,
        )
        detail = await _settle(ws, project_id, result.outcome)

    format_success(f"Task updated: {result.entity.title}")
    format_project_detail(detail, datetime.now())


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    project_id: int = typer.Option(..., "--project", "-p", help=PROJECT_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a task."""
    async with open_workspace() as ws:
        await ws.projects.open_project(project_id)
        current = ws.reconciler.find_task(task_id)
        if current is None:
            raise AppError(
                f"Task {task_id} is not in project {project_id}", exit_codes.ERROR_NOT_FOUND
            )
        if not yes:
            typer.confirm(f"Delete task '{current.title}'?", abort=True)
        outcome = await ws.tasks.delete_task(task_id)
        detail = await _settle(ws, project_id, outcome)

    format_success(f"Task deleted: #{task_id}")
    format_project_detail(detail, datetime.now())

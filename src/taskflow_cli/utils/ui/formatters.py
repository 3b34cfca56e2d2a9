"""Output formatters for different formats."""

import json
from datetime import datetime
from typing import Any

import yaml
from rich.table import Table

from taskflow_cli.config import get_config_manager
from taskflow_cli.models import (
    DashboardSummary,
    DueUrgency,
    Identity,
    Project,
    ProjectWithStats,
    Task,
)
from taskflow_cli.services.aggregation import (
    classify_due_date,
    partition_tasks,
    progress_label,
)
from taskflow_cli.utils.ui.console import get_console

console = get_console()

URGENCY_STYLES = {
    DueUrgency.OVERDUE: ("Overdue", "bold red"),
    DueUrgency.DUE_TODAY: ("Due today", "bold yellow"),
    DueUrgency.UPCOMING: ("Due", "green"),
}


def format_output(data: Any, output_format: str = "table") -> None:
    """Print plain data as JSON or YAML.

    Table output is rendered by the dedicated formatters below; passing
    ``table`` here falls back to a key/value table.
    """
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    else:
        format_single_item(data)


def resolve_output_format(output: str | None) -> str:
    """The format asked for on the command line, else the configured default."""
    return output or get_config_manager().config.output.format


def format_single_item(item: dict) -> None:
    """Format a single item as a two-column table."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), "" if value is None else str(value))
    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def get_progress_bar(percentage: float) -> str:
    """Get a progress bar representation."""
    filled = int(percentage / 10)
    empty = 10 - filled
    return "▓" * filled + "░" * empty


def get_completion_color(percentage: float) -> str:
    """Get color based on completion percentage."""
    if percentage >= 70:
        return "green"
    if percentage >= 30:
        return "yellow"
    return "red"


def format_due_badge(task: Task, now: datetime) -> str:
    """Rich markup for a task's due date, coloured by urgency."""
    urgency = classify_due_date(task.due_date, now)
    if urgency is DueUrgency.NONE:
        return ""
    label, style = URGENCY_STYLES[urgency]
    return f"[{style}]{label} {task.due_date:%d/%m/%Y}[/{style}]"


def format_projects_table(projects: list[ProjectWithStats]) -> None:
    """Projects with their task counts and progress."""
    if not projects:
        console.print("[yellow]No projects yet. Create one with 'taskflow projects create'.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Tasks", justify="right")
    table.add_column("Progress")
    table.add_column("Created")
    for item in projects:
        stats = item.stats
        color = get_completion_color(stats.progress_percentage)
        created = item.project.created_at.strftime("%d/%m/%Y") if item.project.created_at else ""
        table.add_row(
            str(item.project.id),
            item.project.title,
            f"{stats.completed_tasks}/{stats.total_tasks}",
            f"[{color}]{get_progress_bar(stats.progress_percentage)} "
            f"{stats.progress_percentage}%[/{color}]",
            created,
        )
    console.print(table)


def format_task_list(tasks: list[Task], now: datetime) -> None:
    """Pending tasks first, then completed ones."""
    pending, completed = partition_tasks(tasks)
    if not tasks:
        console.print("[dim]No tasks in this project.[/dim]")
        return

    console.print(f"\n[bold]Pending ({len(pending)})[/bold]")
    for task in pending:
        badge = format_due_badge(task, now)
        console.print(f"  ⬜ [dim]#{task.id}[/dim] {task.title}  {badge}".rstrip())
        if task.description:
            console.print(f"      [dim]{task.description}[/dim]")

    console.print(f"\n[bold]Completed ({len(completed)})[/bold]")
    for task in completed:
        console.print(f"  ☑️  [dim]#{task.id}[/dim] [strike]{task.title}[/strike]")


def format_project_detail(item: ProjectWithStats, now: datetime) -> None:
    """A project's header, progress and task list."""
    stats = item.stats
    color = get_completion_color(stats.progress_percentage)
    console.print(f"\n[bold cyan]📁 {item.project.title}[/bold cyan] [dim]#{item.project.id}[/dim]")
    if item.project.description:
        console.print(item.project.description)
    console.print(
        f"\nProgress: [{color}]{get_progress_bar(stats.progress_percentage)} "
        f"{stats.progress_percentage}%[/{color}] "
        f"({stats.completed_tasks}/{stats.total_tasks} tasks) - "
        f"{progress_label(stats.progress_percentage)}"
    )
    format_task_list(item.tasks, now)


def format_dashboard(summary: DashboardSummary, identity: Identity | None) -> None:
    """Totals, overall progress and the most recent projects."""
    first_name = identity.display_name.split(" ")[0] if identity else "User"
    console.print(f"\n[bold]Welcome back, {first_name}![/bold]\n")

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total projects", str(summary.total_projects))
    table.add_row("Total tasks", f"{summary.total_tasks} ({summary.pending_tasks} pending)")
    table.add_row("Completed tasks", str(summary.completed_tasks))
    color = get_completion_color(summary.overall_progress)
    table.add_row(
        "Overall progress",
        f"[{color}]{get_progress_bar(summary.overall_progress)} {summary.overall_progress}%[/{color}]",
    )
    console.print(table)

    console.print("\n[bold]Recent projects[/bold]")
    format_projects_table(summary.recent_projects)


def format_skipped_projects(projects: list[Project]) -> None:
    """Warn about projects left out because their tasks failed to load."""
    if not projects:
        return
    format_warning(f"Tasks failed to load for {len(projects)} project(s); totals exclude:")
    for project in projects:
        console.print(f"  - {project.title} [dim]#{project.id}[/dim]")

"""Dashboard command: totals and progress across all projects."""

import typer

from taskflow_cli.services.workspace import open_workspace
from taskflow_cli.utils.ui.formatters import (
    format_dashboard,
    format_output,
    format_skipped_projects,
    resolve_output_format,
)

from .decorators import command_wrapper


@command_wrapper
async def dashboard(
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output format (table, json, yaml); defaults to output.format"
    ),
) -> None:
    """Show an overview of your projects and tasks."""
    output = resolve_output_format(output)
    async with open_workspace() as ws:
        await ws.projects.refresh()
        summary = ws.reconciler.summary(ws.config.aggregation.recent_projects)
        identity = ws.session_store.identity

    if output in ("json", "yaml"):
        format_output(summary.model_dump(mode="json"), output)
        return
    format_dashboard(summary, identity)
    format_skipped_projects(summary.skipped_projects)

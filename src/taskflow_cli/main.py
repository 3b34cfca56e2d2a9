"""Main entry point for TaskFlow CLI."""

import typer

from taskflow_cli import __version__
from taskflow_cli.commands import auth, config, dashboard, projects, tasks
from taskflow_cli.utils.typer_helpers import SuggestingGroup
from taskflow_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="taskflow",
    cls=SuggestingGroup,
    help="Command-line client for TaskFlow projects and tasks",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(projects.app, name="projects", help="Project management commands")
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(auth.app, name="auth", help="Authentication commands")

# Add top-level commands
app.command("login")(auth.login)
app.command("logout")(auth.logout)
app.command("whoami")(auth.whoami)
app.command("dashboard")(dashboard.dashboard)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]TaskFlow CLI[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()

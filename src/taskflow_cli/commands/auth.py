"""Authentication commands."""

import typer
from rich.prompt import Prompt

from taskflow_cli.errors import Unauthorized
from taskflow_cli.services.workspace import open_workspace
from taskflow_cli.utils import exit_codes
from taskflow_cli.utils.typer_helpers import SuggestingGroup
from taskflow_cli.utils.ui.console import get_console
from taskflow_cli.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Authentication commands")
console = get_console()


@app.command()
@command_wrapper(auth_required=False)
async def login(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Login to TaskFlow."""
    # Prompt for credentials if not provided
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)

    async with open_workspace() as ws:
        try:
            session = await ws.auth.login(email, password)
        except Unauthorized as e:
            raise AppError(
                "Invalid email or password", exit_codes.ERROR_AUTH_FAILURE
            ) from e

    format_success(
        f"Logged in as {session.identity.display_name} ({session.identity.email})"
    )


@app.command()
@command_wrapper(auth_required=False)
async def logout() -> None:
    """Logout from TaskFlow."""
    async with open_workspace() as ws:
        if not ws.auth.is_authenticated():
            format_info("Not logged in")
            return
        ws.auth.logout()
    format_success("Logged out successfully")


@app.command()
@command_wrapper(auth_required=False)
async def whoami() -> None:
    """Show the logged-in user."""
    async with open_workspace() as ws:
        identity = ws.auth.current_identity()
    if identity is None:
        format_info("Not logged in. Use 'taskflow login' to authenticate.")
        return
    console.print(f"[bold]{identity.display_name}[/bold] <{identity.email}>")

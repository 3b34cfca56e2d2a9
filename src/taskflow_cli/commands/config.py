"""Configuration management commands."""

import json
from enum import Enum

import typer
from pydantic import BaseModel, ValidationError

from taskflow_cli.config import get_config_manager
from taskflow_cli.utils import exit_codes
from taskflow_cli.utils.typer_helpers import SuggestingGroup
from taskflow_cli.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management")


def _coerce(value: str):
    """Interpret a command-line value as JSON when possible (numbers, booleans)."""
    try:
        return json.loads(value)
    except ValueError:
        return value


@app.command("get")
@command_wrapper(auth_required=False)
def get_config(
    key: str | None = typer.Argument(None, help="Dotted key, e.g. api.endpoint"),
) -> None:
    """Show one setting, or the whole configuration."""
    manager = get_config_manager()
    if key is None:
        format_output(manager.config.model_dump(mode="json"), "yaml")
        return
    value = manager.get(key)
    if value is None:
        raise AppError(f"Unknown setting: {key}", exit_codes.ERROR_INVALID_ARGS)
    if isinstance(value, BaseModel):
        format_output(value.model_dump(mode="json"), "yaml")
    elif isinstance(value, Enum):
        print(value.value)
    else:
        print(value)


@app.command("set")
@command_wrapper(auth_required=False)
def set_config(
    key: str = typer.Argument(..., help="Dotted key, e.g. api.endpoint"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change a setting."""
    manager = get_config_manager()
    try:
        manager.set(key, _coerce(value))
    except KeyError as e:
        raise AppError(f"Unknown setting: {key}", exit_codes.ERROR_INVALID_ARGS) from e
    except ValidationError as e:
        raise AppError(
            f"Invalid value for {key}: {e.errors()[0]['msg']}",
            exit_codes.ERROR_INVALID_ARGS,
        ) from e
    format_success(f"{key} = {value}")


@app.command("reset")
@command_wrapper(auth_required=False)
def reset_config(
    key: str | None = typer.Argument(None, help="Dotted key to reset; all when omitted"),
) -> None:
    """Reset settings to their defaults."""
    manager = get_config_manager()
    try:
        manager.reset(key)
    except KeyError as e:
        raise AppError(f"Unknown setting: {key}", exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Reset {key or 'all settings'} to defaults")

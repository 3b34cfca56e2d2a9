"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from taskflow_cli.config import get_config_manager
from taskflow_cli.errors import (
    Conflict,
    NetworkFailure,
    NotFound,
    ServerFailure,
    TaskFlowError,
    Unauthorized,
    ValidationFailed,
)
from taskflow_cli.services.workspace import get_session_store
from taskflow_cli.utils import exit_codes
from taskflow_cli.utils.logger import get_logger
from taskflow_cli.utils.ui.console import apply_color_setting
from taskflow_cli.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a persisted session before talking to the API."""
    store = get_session_store(get_config_manager())
    if not store.is_authenticated():
        raise AppError(
            "Not logged in. Use 'taskflow login' to authenticate.",
            exit_codes.ERROR_AUTH_FAILURE,
        )


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def to_app_error(error: TaskFlowError) -> AppError:
    """Translate an API error into a user-facing message and exit code."""
    if isinstance(error, Unauthorized):
        return AppError(
            f"{error.message}. Your session has ended; run 'taskflow login'.",
            exit_codes.ERROR_AUTH_FAILURE,
        )
    if isinstance(error, ValidationFailed):
        return AppError(f"Invalid input - {error}", exit_codes.ERROR_INVALID_ARGS)
    if isinstance(error, NotFound):
        return AppError(
            f"{error.message}. It may have been deleted; reload and try again.",
            exit_codes.ERROR_NOT_FOUND,
        )
    if isinstance(error, Conflict):
        return AppError(error.message, exit_codes.ERROR_CONFLICT)
    if isinstance(error, (NetworkFailure, ServerFailure)):
        return AppError(
            f"{error.message}. Please try again.", exit_codes.ERROR_NETWORK
        )
    return AppError(error.message, exit_codes.ERROR_GENERAL)


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                apply_color_setting(get_config_manager().config.output.color)

                # 1. Handle Auth
                if auth_required:
                    _require_auth()

                # 2. Run Sync or Async
                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except TaskFlowError as e:
                app_error = to_app_error(e)
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) [%s] - %s: %s",
                    cmd,
                    elapsed,
                    exit_codes.get_exit_code_name(app_error.exit_code),
                    type(e).__name__,
                    e,
                )
                format_error(str(app_error))
                raise typer.Exit(code=app_error.exit_code) from e

            except AppError as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) [%s] - %s",
                    cmd,
                    elapsed,
                    exit_codes.get_exit_code_name(e.exit_code),
                    str(e),
                )
                format_error(str(e))
                raise typer.Exit(code=e.exit_code) from e

            except (typer.Exit, typer.Abort):
                # Re-raise Typer's own exits (like --help, explicit Exit(0) or a declined prompt)
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) [%s] - %s\n%s",
                    cmd,
                    elapsed,
                    exit_codes.get_exit_code_name(exit_codes.ERROR_GENERAL),
                    str(e),
                    traceback.format_exc(),
                )
                # Generic fallback for unexpected crashes
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)

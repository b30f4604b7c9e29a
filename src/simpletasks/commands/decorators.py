"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from simpletasks.config import get_config_manager
from simpletasks.runtime import build_session_store
from simpletasks.utils.exit_codes import ERROR_AUTH_FAILURE, ERROR_GENERAL, get_exit_code_name
from simpletasks.utils.logger import get_logger
from simpletasks.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a stored session token."""
    session_store = build_session_store(get_config_manager())
    if session_store.get() is None:
        format_error("Not logged in. Use 'simpletasks login' to authenticate.")
        raise typer.Exit(ERROR_AUTH_FAILURE)


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


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
                if auth_required:
                    _require_auth()

                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except AppError as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s [%s]",
                    cmd,
                    elapsed,
                    str(e),
                    get_exit_code_name(e.exit_code),
                )
                format_error(str(e))
                raise typer.Exit(code=e.exit_code) from e

            except typer.Exit:
                # Re-raise Typer's own exits (like --help or explicit Exit(0))
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)

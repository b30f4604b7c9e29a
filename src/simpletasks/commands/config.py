"""Configuration management commands."""

from typing import Optional

import typer

from simpletasks.config import get_config_manager
from simpletasks.utils.exit_codes import ERROR_INVALID_ARGS
from simpletasks.utils.typer_helpers import SuggestingGroup
from simpletasks.utils.ui.console import get_console
from simpletasks.utils.ui.formatters import format_info, format_json, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


@app.command("view")
@command_wrapper(auth_required=False)
def view_config(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """View current configuration."""
    config_manager = get_config_manager(profile)
    format_json(config_manager.config.model_dump())


@app.command("get")
@command_wrapper(auth_required=False)
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Get a configuration value."""
    value = get_config_manager(profile).get(key)
    if value is None:
        raise AppError(f"Configuration key '{key}' not found", ERROR_INVALID_ARGS)
    console.print(value, markup=False)


@app.command("set")
@command_wrapper(auth_required=False)
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
    value: str = typer.Argument(..., help="Configuration value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Set a configuration value."""
    config_manager = get_config_manager(profile)
    try:
        # The field type decides the conversion.
        config_manager.set(key, value)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_INVALID_ARGS) from e
    except ValueError as e:
        raise AppError(f"Invalid value for '{key}': {value}", ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{config_manager.get(key)}'")


@app.command("reset")
@command_wrapper(auth_required=False)
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            format_info("Cancelled")
            raise typer.Exit(0)

    try:
        get_config_manager(profile).reset(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_INVALID_ARGS) from e

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")

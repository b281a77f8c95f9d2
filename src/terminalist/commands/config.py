"""Configuration management commands."""

import json

import typer

from terminalist.services.config_service import get_config_service
from terminalist.utils.ui.console import get_console
from terminalist.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _parse_value(value: str):
    """Interpret a command-line value as JSON when possible ("90", "true", "null")."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@app.command("view")
@command_wrapper
def view_config() -> None:
    """View current configuration."""
    console.print_json(data=get_config_service().config.model_dump())


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., sync.upcoming_days)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError:
        raise AppError(f"Configuration key '{key}' not found") from None
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ui.default_view)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    try:
        get_config_service().set(key, _parse_value(value))
    except KeyError:
        raise AppError(f"Configuration key '{key}' not found") from None
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Set {key} = {value}")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Reset configuration to defaults?"):
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")

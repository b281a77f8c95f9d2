"""Backend instance management commands."""

import typer

from terminalist.backends.registry import BACKEND_FACTORIES
from terminalist.models import BackendInstance
from terminalist.services.config_service import get_config_service
from terminalist.utils.ui.formatters import format_backends, format_error, format_success

from .context import registry_session
from .decorators import AppError, command_wrapper

app = typer.Typer(help="Backend instance management commands")


def _find_instance(instances: list[BackendInstance], ref: str) -> BackendInstance:
    matches = [i for i in instances if i.uuid.startswith(ref.lower())]
    if len(matches) != 1:
        raise AppError(f"No single backend matches '{ref}'")
    return matches[0]


@app.command("add")
@command_wrapper
async def add_backend(
    name: str = typer.Argument(..., help="Display name for the instance"),
    backend_type: str = typer.Option("todoist", "--type", "-t", help="Backend type"),
    token: str = typer.Option(
        ..., "--token", prompt=True, hide_input=True, help="API token"
    ),
    default: bool = typer.Option(
        False, "--default", help="Use this backend for commands"
    ),
) -> None:
    """Add a backend instance."""
    if backend_type not in BACKEND_FACTORIES:
        known = ", ".join(sorted(BACKEND_FACTORIES))
        raise AppError(f"Unknown backend type '{backend_type}' (known: {known})")

    async with registry_session() as registry:
        instance = await registry.add_backend_instance(
            backend_type, name, {"api_token": token}
        )

    config_service = get_config_service()
    if default or config_service.config.default_backend is None:
        config_service.set("default_backend", instance.uuid)
    format_success(f"Backend added: {instance.uuid}")


@app.command("list")
@command_wrapper
async def list_backends() -> None:
    """List configured backend instances."""
    async with registry_session() as registry:
        instances = await registry.list_instances()
    format_backends(instances, get_config_service().config.default_backend)


@app.command("use")
@command_wrapper
async def use_backend(
    backend_id: str = typer.Argument(..., help="Backend instance ID or prefix"),
) -> None:
    """Make a backend instance the one commands work against."""
    async with registry_session() as registry:
        instances = await registry.list_instances()

    instance = _find_instance(instances, backend_id)
    get_config_service().set("default_backend", instance.uuid)
    format_success(f"Default backend: {instance.name}")


@app.command("remove")
@command_wrapper
async def remove_backend(
    backend_id: str = typer.Argument(..., help="Backend instance ID or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove a backend instance and its cached data."""
    async with registry_session() as registry:
        instances = await registry.list_instances()
        instance = _find_instance(instances, backend_id)

        if not yes:
            confirm = typer.confirm(f"Remove backend '{instance.name}' and its cached data?")
            if not confirm:
                format_error("Cancelled")
                raise typer.Exit(0)

        await registry.remove_backend_instance(instance.uuid)

    config_service = get_config_service()
    if config_service.config.default_backend == instance.uuid:
        config_service.set("default_backend", None)
    format_success(f"Backend removed: {instance.uuid}")

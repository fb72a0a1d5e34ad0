"""Main entry point for the sharedkv command line tool.

Sets up the Typer CLI application, performs dependency injection (Composition
Root), defines the administration commands, and delegates to the CacheFacade.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from sharedkv.core.cache_facade import CacheFacade

# --- Domain Layer ---
from sharedkv.domain.errors import CacheError
from sharedkv.domain.interfaces.backend_store import BackendStore
from sharedkv.domain.interfaces.trigger_source import TriggerSource
from sharedkv.domain.interfaces.user_interface import UserInterface

# --- Infrastructure Layer ---
from sharedkv.infrastructure.cli.display import ConsoleDisplay
from sharedkv.infrastructure.config.settings import (
    get_backend_name,
    get_bypass_trigger,
    get_config,
    get_disk_directory,
    get_disk_timeout,
    get_flush_trigger,
    get_memory_max_items,
    get_namespace,
    get_require_namespace,
    load_configuration,
)
from sharedkv.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging
from sharedkv.infrastructure.stores.disk_store import DiskStore
from sharedkv.infrastructure.stores.memory_store import MemoryStore
from sharedkv.infrastructure.triggers.trigger_sources import EnvironmentTriggerSource

logger = logging.getLogger(__name__)


class Backend(str, Enum):
    memory = "memory"
    disk = "disk"


class ValueType(str, Enum):
    string = "str"
    integer = "int"
    number = "float"
    boolean = "bool"


# --- Dependency Injection Container (Manual) ---

def create_store(backend: Optional[str] = None, directory: Optional[Path] = None) -> BackendStore:
    """Builds the backend store named in configuration (or given explicitly)."""
    backend_name = backend or get_backend_name()
    if backend_name == Backend.memory.value:
        return MemoryStore(max_items=get_memory_max_items())
    return DiskStore(directory=directory or get_disk_directory(), timeout=get_disk_timeout())


def create_dependencies(
    namespace: Optional[str] = None,
    backend: Optional[str] = None,
    directory: Optional[Path] = None,
    trigger_source: Optional[TriggerSource] = None,
) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root. Configured bypass/flush triggers are
    checked against the trigger source (environment variables by default).

    Raises:
        CacheError: If the namespace is invalid or a triggered flush fails.
    """
    load_configuration()
    setup_logging(
        log_level=get_config('logging.level', 'WARNING'),
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
    )

    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()
    dependencies['store'] = create_store(backend, directory)

    cache = CacheFacade(dependencies['store'], require_namespace=get_require_namespace())
    selected_namespace = namespace or get_namespace()
    if selected_namespace:
        cache.init(selected_namespace)

    source = trigger_source or EnvironmentTriggerSource()
    cache.setup_bypass_by(get_bypass_trigger(), source)
    cache.check_for_flushing_by(get_flush_trigger(), source)
    dependencies['cache'] = cache

    logger.info("All dependencies initialized successfully.")
    return dependencies


def parse_value(raw: str, value_type: ValueType) -> Any:
    """Converts the command line text into the requested scalar type.

    Raises:
        ValueError: If the text cannot be converted.
    """
    if value_type == ValueType.integer:
        return int(raw)
    if value_type == ValueType.number:
        return float(raw)
    if value_type == ValueType.boolean:
        lowered = raw.lower()
        if lowered in ('true', '1', 'yes'):
            return True
        if lowered in ('false', '0', 'no'):
            return False
        raise ValueError(f"Not a boolean: {raw!r}")
    return raw


# --- Typer App Definition ---
app = typer.Typer(
    name="sharedkv",
    help="sharedkv: inspect and manage a shared key/value cache through the cache facade.",
    add_completion=False,
)


def _run(ctx: typer.Context, action: str, operation: Callable[[CacheFacade, UserInterface], None]) -> None:
    """Runs a command against the wired-up facade, reporting cache errors."""
    cache: CacheFacade = ctx.obj['cache']
    ui: UserInterface = ctx.obj['ui']
    try:
        operation(cache, ui)
    except CacheError as e:
        logger.error(f"{action} failed: {e}")
        ui.display_error(f"{action} failed: {e}")
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    namespace: Annotated[Optional[str], typer.Option("--namespace", "-n", help="Namespace applied to every key.")] = None,
    backend: Annotated[Optional[Backend], typer.Option("--backend", "-b", help="Backend store to use.")] = None,
    directory: Annotated[Optional[Path], typer.Option("--directory", "-d", file_okay=False, help="Directory of the disk store.")] = None,
    show_stats: Annotated[bool, typer.Option("--show-stats", help="Print operation counters when done.")] = False,
):
    """Wires up the cache facade shared by every command."""
    try:
        dependencies = create_dependencies(
            namespace=namespace,
            backend=backend.value if backend else None,
            directory=directory,
        )
    except CacheError as e:
        logger.error(f"Initialization failed: {e}")
        ConsoleDisplay().display_error(f"Initialization failed: {e}")
        raise typer.Exit(code=1)

    ctx.obj = dependencies
    store = dependencies['store']
    if isinstance(store, DiskStore):
        ctx.call_on_close(store.close)
    if show_stats:
        ctx.call_on_close(lambda: dependencies['ui'].display_stats(dependencies['cache'].get_stats()))


# --- CLI Commands ---

@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key to read.")],
):
    """Read a value from the cache."""
    def operation(cache: CacheFacade, ui: UserInterface) -> None:
        value = cache.read(key)
        if value is None:
            ui.display_info(f"No value cached for '{key}'.")
        else:
            ui.display_value(key, value)

    _run(ctx, "Read", operation)


@app.command(name="set")
def set_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key to write.")],
    value: Annotated[str, typer.Argument(help="Value to store.")],
    ttl: Annotated[int, typer.Option("--ttl", min=0, help="Time-to-live in seconds (0 = no expiry).")] = 0,
    value_type: Annotated[ValueType, typer.Option("--type", "-t", help="Type the value is stored as.")] = ValueType.string,
):
    """Write a value to the cache."""
    try:
        parsed = parse_value(value, value_type)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="VALUE")

    def operation(cache: CacheFacade, ui: UserInterface) -> None:
        cache.write(key, parsed, ttl=ttl)
        ui.display_info(f"Stored '{key}'.")

    _run(ctx, "Write", operation)


@app.command()
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key to delete.")],
    strict: Annotated[bool, typer.Option("--strict", help="Fail if the key could not be deleted.")] = False,
):
    """Delete a key from the cache."""
    def operation(cache: CacheFacade, ui: UserInterface) -> None:
        if cache.delete(key, throw_on_failure=strict):
            ui.display_info(f"Deleted '{key}'.")
        else:
            ui.display_warning(f"Nothing deleted for '{key}' (missing key or backend failure).")

    _run(ctx, "Delete", operation)


@app.command()
def flush(ctx: typer.Context):
    """Remove every entry from the backend store."""
    def operation(cache: CacheFacade, ui: UserInterface) -> None:
        cache.flush()
        ui.display_info("Cache flushed.")

    _run(ctx, "Flush", operation)


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()

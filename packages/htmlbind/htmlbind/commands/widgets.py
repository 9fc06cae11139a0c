"""htmlbind: Widget Inspection Commands
---------------------------------------------------------
Implements ``htmlbind list`` and ``htmlbind show``. Both build a fresh
registry from the built-ins, the configured plugin modules and the entry
point group, so the output reflects what a runtime would see.
"""

from pathlib import Path

import typer

from htmlbind.core.config import load_runtime_config
from htmlbind.core.errors import HBError, get_logger
from htmlbind.core.registry import WidgetRegistry
from htmlbind.plugins import load_plugins


def _registry(config_path: Path | None) -> WidgetRegistry:
    config = load_runtime_config(force_reload=True, config_path=config_path)
    return load_plugins(WidgetRegistry(), config)


def list_widgets(
    config_path: Path | None = typer.Option(
        None, "--config", help="Runtime configuration file"
    ),
):
    """List registered widgets with their kind and sizing mode."""
    log = get_logger()
    try:
        registry = _registry(config_path)
    except HBError as e:
        log.error(str(e))
        raise typer.Exit(code=1)

    if not len(registry):
        typer.echo("No widgets registered.")
        return
    typer.echo("\nRegistered widgets:")
    for name in registry.names():
        try:
            d = registry.get(name)
        except HBError as e:
            typer.echo(f"  - {name:<20} <unavailable: {e}>")
            continue
        typer.echo(f"  - {name:<20} {d.kind.value:<8} {d.sizing.mode}")
    typer.echo(f"\nTotal: {len(registry)} widget(s)")


def show_widget(
    name: str = typer.Argument(..., help="Widget name"),
    config_path: Path | None = typer.Option(
        None, "--config", help="Runtime configuration file"
    ),
):
    """Show the definition and registry metadata of one widget."""
    log = get_logger()
    try:
        registry = _registry(config_path)
        d = registry.get(name)
    except HBError as e:
        log.error(str(e))
        raise typer.Exit(code=1)

    meta = registry.list()[d.name]
    typer.echo(f"name: {d.name}")
    typer.echo(f"kind: {d.kind.value}")
    typer.echo(f"sizing: {d.sizing.mode}")
    if d.sizing.default_width is not None or d.sizing.default_height is not None:
        typer.echo(f"default_size: {d.sizing.default_width}x{d.sizing.default_height}")
    typer.echo(f"callbacks: {', '.join(d.callbacks)}")
    typer.echo(f"source: {meta['source']}")
    if "module_path" in meta:
        typer.echo(f"module_path: {meta['module_path']}")

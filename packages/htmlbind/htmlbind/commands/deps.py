"""htmlbind: Dependency Commands
---------------------------------------------------------
Implements ``htmlbind deps``: loads one or more dependency manifests and
prints the resolved, de-duplicated asset list in load order. Without
arguments, every ``*.yaml``/``*.yml`` file in the configured
``manifest_dirs`` is used.
"""

from pathlib import Path

import typer

from htmlbind.core.config import load_runtime_config
from htmlbind.core.dependencies import load_manifest, resolve_dependencies
from htmlbind.core.errors import HBError, get_logger


def _discover(dirs: list[Path]) -> list[Path]:
    found: list[Path] = []
    for d in dirs:
        if not d.is_dir():
            continue
        found.extend(sorted([*d.glob("*.yaml"), *d.glob("*.yml")]))
    return found


def deps(
    manifests: list[Path] | None = typer.Argument(
        None, help="Manifest files (defaults to manifest_dirs from the config)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Runtime configuration file"
    ),
):
    """Resolve dependency manifests into an ordered asset list."""
    log = get_logger()
    try:
        if not manifests:
            config = load_runtime_config(force_reload=True, config_path=config_path)
            manifests = _discover(config.get_manifest_dirs())
        if not manifests:
            typer.echo("No dependency manifests found.")
            return
        resolved = resolve_dependencies(load_manifest(p) for p in manifests)
    except HBError as e:
        log.error(str(e))
        raise typer.Exit(code=1)

    for dep in resolved:
        typer.echo(f"{dep.name} {dep.version}")
        for asset in dep.asset_paths():
            typer.echo(f"  {asset}")

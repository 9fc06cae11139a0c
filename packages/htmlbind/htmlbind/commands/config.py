"""htmlbind: Configuration Commands
---------------------------------------------------------
Implements the ``htmlbind config`` command group.
"""

from pathlib import Path

import typer

from htmlbind.core.config import load_runtime_config
from htmlbind.core.errors import HBError, get_logger

app = typer.Typer()


@app.command()
def show(
    config_path: Path | None = typer.Option(
        None, "--config", help="Runtime configuration file applied last"
    ),
):
    """Print the effective runtime configuration as JSON."""
    try:
        config = load_runtime_config(force_reload=True, config_path=config_path)
    except HBError as e:
        get_logger().error(str(e))
        raise typer.Exit(code=1)
    typer.echo(config.model_dump_json(indent=2))

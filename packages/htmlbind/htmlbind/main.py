"""htmlbind: CLI Entry Point
---------------------------------------------------------
The entry point for the ``htmlbind`` command line tool. It initializes the
Typer application, configures logging from the global options and wires the
inspection commands (``list``, ``show``, ``deps``, ``config``).

Public API
----------
``app`` : The main Typer application instance.
"""

import typer

from .commands import config as config_cmd
from .commands.deps import deps
from .commands.widgets import list_widgets, show_widget
from .core.errors import HBError, configure_logging, get_logger

app = typer.Typer(help="htmlbind widget runtime tools")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, help="Write logs to file path"),
    log_json: bool = typer.Option(False, help="Log in JSON format"),
    suppress_warnings: bool = typer.Option(False, help="Suppress warnings output"),
):
    """htmlbind command line interface."""
    try:
        configure_logging(
            verbose=verbose,
            log_file=log_file,
            as_json=log_json,
            suppress_warnings=suppress_warnings,
        )
    except HBError as e:
        get_logger().error(str(e))
        raise typer.Exit(code=1)


app.command("list")(list_widgets)
app.command("show")(show_widget)
app.command("deps")(deps)

app.add_typer(config_cmd.app, name="config", help="Inspect runtime configuration")

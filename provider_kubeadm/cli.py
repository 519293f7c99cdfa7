"""Command line entry point invoked by the plugin host."""
import sys

import typer

from .config import Config
from .errors import ProviderError
from .logging import setup_logger
from .plugin import build_plugin

app = typer.Typer(add_completion=False)


@app.command()
def main(
    event: str = typer.Argument(..., help="Name of the bus event to handle"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Kubeadm cluster provider plugin.

    Reads the event as JSON from stdin and writes the response as JSON to stdout.
    """
    logger = setup_logger(debug=debug)
    if debug:
        logger.debug("Debug mode enabled")

    try:
        Config.validate()
        plugin = build_plugin()
        response = plugin.run(event, sys.stdin.read())
    except (ProviderError, ValueError) as e:
        logger.critical(f"Error handling {event}: {e}")
        raise typer.Exit(code=1)

    typer.echo(response.model_dump_json())


if __name__ == "__main__":
    app()

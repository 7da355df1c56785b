"""Root CLI application for apkstats."""

import typer

from apkstats import __version__
from apkstats.cli import manifest
from apkstats.utils.config import get_log_level
from apkstats.utils.log import setup_logging

app = typer.Typer(
    name="apkstats",
    help="Collect statistics from decompiled Android packages.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(manifest.app, name="manifest", help="Extract AndroidManifest.xml facts")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"apkstats {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Log extraction progress to stderr.",
    ),
) -> None:
    """apkstats - statistics over decompiled Android packages."""
    setup_logging("DEBUG" if verbose else get_log_level())


if __name__ == "__main__":
    app()

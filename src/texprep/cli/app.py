"""Root Typer app with global options."""

from __future__ import annotations

from typing import Optional

import typer

from texprep.utils import configure_logging

app = typer.Typer(
    name="texprep",
    help="Resolve per-platform texture import settings from policy rules.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        from texprep import __version__

        typer.echo(f"texprep {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version."
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Log resolver decisions (-vv for debug)."
    ),
) -> None:
    """texprep — texture import policy resolver."""
    configure_logging(verbose)


# Import and register commands
from texprep.cli.plan import plan, show  # noqa: E402
from texprep.cli.resolve import resolve_cmd  # noqa: E402
from texprep.cli.rules import rules_cmd  # noqa: E402

app.command(name="resolve")(resolve_cmd)
app.command()(plan)
app.command()(show)
app.command(name="rules")(rules_cmd)

"""
Root Typer application for the transport-spine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from transport_spine.cli.dsn import app as dsn_app

app = Typer(
    name="transport-spine",
    help="transport-spine — message transport bootstrap tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from transport_spine import __version__

        typer.echo(f"transport-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for CLI output."),
) -> None:
    """transport-spine CLI — inspect connection configuration."""
    from transport_spine.core.logging import configure_logging

    configure_logging(level=log_level)


app.add_typer(dsn_app, name="dsn", help="Connection string normalization.")


if __name__ == "__main__":
    app()

"""
CLI: ``transport-spine dsn`` — connection string inspection.
"""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.table import Table

from transport_spine.core.errors import TransportError
from transport_spine.dbal.dsn import SUPPORTED_SCHEMES, normalize_config

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(no_args_is_help=True)


@app.command("normalize")
def normalize(
    dsn: str = typer.Argument("", help="Connection string; empty means the local default."),
    as_json: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Show the configuration a DSN normalizes to."""
    try:
        descriptor = normalize_config(dsn or None)
    except TransportError as exc:
        err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {exc.message}")
        raise typer.Exit(code=1) from exc

    payload = {
        "scheme": descriptor.scheme,
        "driver_id": descriptor.driver_id,
        **descriptor.to_dict(),
    }

    if as_json:
        console.print_json(json.dumps(payload, default=str))
        return

    table = Table(title="Normalized connection")
    table.add_column("Key")
    table.add_column("Value")
    table.add_row("scheme", str(descriptor.scheme))
    table.add_row("driver_id", str(descriptor.driver_id))
    table.add_row("url", str(descriptor.url))
    table.add_row("table_name", descriptor.table_name)
    table.add_row("polling_interval", str(descriptor.polling_interval))
    table.add_row("lazy", str(descriptor.lazy))
    console.print(table)


@app.command("schemes")
def schemes(
    as_json: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """List supported DSN schemes and the driver ids they map to."""
    if as_json:
        console.print_json(json.dumps(SUPPORTED_SCHEMES))
        return

    table = Table(title="Supported schemes")
    table.add_column("Scheme")
    table.add_column("Driver id")
    for scheme, driver_id in SUPPORTED_SCHEMES.items():
        table.add_row(scheme, driver_id)
    console.print(table)

"""Trades subcommand: list, export."""

from __future__ import annotations

import typer

from daybook.cli.options import parse_date_option
from daybook.report.render import format_number
from daybook.storage.db import get_connection, init_schema
from daybook.storage.export import export_trades_to_parquet
from daybook.storage.trades import list_trades

app = typer.Typer(help="Stored aggregated trades")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    date: str | None = typer.Option(None, "--date", "-d", help="Trade date YYYY-MM-DD"),
    client: str | None = typer.Option(None, "--client", "-c", help="Client code"),
) -> None:
    """List stored trades."""
    settings = ctx.obj["settings"]
    trade_date = parse_date_option(date)
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        rows = list_trades(conn, trade_date=trade_date, client_code=client)
        for t in rows:
            typer.echo(
                f"  {t.date.isoformat()}  {t.client_code:<8} {t.transaction_type:<4} {t.security_id:<16}"
                f" {format_number(t.quantity):>10} @ {format_number(t.price):<12} {t.exchange_code}  {t.ref_id}"
            )
        typer.echo(f"Total: {len(rows)} trades")
    finally:
        conn.close()


@app.command("export")
def export(
    ctx: typer.Context,
    date: str | None = typer.Option(None, "--date", "-d", help="Filter by trade date YYYY-MM-DD"),
    output: str = typer.Option("trades.parquet", "--output", "-o", help="Output path"),
) -> None:
    """Export stored trades to Parquet."""
    settings = ctx.obj["settings"]
    trade_date = parse_date_option(date)
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        count = export_trades_to_parquet(conn, output, trade_date=trade_date)
        typer.echo(f"Exported {count} trades to {output}")
    finally:
        conn.close()

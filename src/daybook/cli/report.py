"""Report subcommand: run, show."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import structlog
import typer

from daybook.aggregation import AttributionPolicy
from daybook.cli.options import parse_date_option
from daybook.config.settings import ConfigError
from daybook.errors import DaybookError
from daybook.ingestion import load_order_book
from daybook.pipeline import run_daily_report
from daybook.report.files import write_report
from daybook.report.mail import build_html_body, build_message
from daybook.storage.db import get_connection, init_schema
from daybook.storage.trades import get_report, store_daily_report

log = structlog.get_logger(__name__)

app = typer.Typer(help="Generate and show daily trade reports")


def _parse_books(books: list[str], sources: list[str], settings) -> dict[str, Path]:
    """ACCOUNT=FILE pairs, falling back to each account's configured order_book path."""
    paths = {source: Path(settings.order_book_path(source)) for source in sources}
    for item in books:
        account, sep, path = item.partition("=")
        if not sep or not account or not path:
            typer.echo(f"Invalid --book {item!r}, expected ACCOUNT=FILE", err=True)
            raise typer.Exit(1)
        paths[account.strip()] = Path(path.strip())
    return paths


@app.command("run")
def run_report(
    ctx: typer.Context,
    book: list[str] = typer.Option(
        [], "--book", "-b", help="Order book per account as ACCOUNT=FILE (default: config order_book paths)"
    ),
    date: str | None = typer.Option(None, "--date", "-d", help="As-of date YYYY-MM-DD (default: today)"),
    policy: str | None = typer.Option(
        None, "--policy", help="Price attribution: last, first, weighted_average (default: config)"
    ),
    output_dir: str | None = typer.Option(None, "--output-dir", "-o", help="Report directory (default: config)"),
    store: bool = typer.Option(True, "--store/--no-store", help="Persist trades and report to DuckDB"),
    html: Path | None = typer.Option(None, "--html", help="Also write the HTML email body to this file"),
    eml: Path | None = typer.Option(None, "--eml", help="Also write the full email (text + HTML) as an .eml file"),
    print_report: bool = typer.Option(True, "--print/--no-print", help="Echo the report to stdout"),
) -> None:
    """Aggregate the order books for every configured view and write the daily file."""
    settings = ctx.obj["settings"]
    as_of = parse_date_option(date) or dt.date.today()
    try:
        attribution = AttributionPolicy(policy or settings.attribution)
    except ValueError:
        choices = ", ".join(p.value for p in AttributionPolicy)
        typer.echo(f"Unknown policy: {policy or settings.attribution}. Choose from: {choices}", err=True)
        raise typer.Exit(1)
    try:
        views = settings.views
        paths = _parse_books(book, settings.view_sources, settings)
        order_books = {source: load_order_book(path) for source, path in paths.items()}
        daily = run_daily_report(order_books, views, as_of, attribution)
    except (DaybookError, ConfigError) as e:
        typer.echo(f"Report failed: {e}", err=True)
        raise typer.Exit(1)

    path = write_report(output_dir or settings.report_output_dir, as_of, daily.text)
    log.info("report_written", path=str(path), as_of=as_of.isoformat())
    if html is not None:
        html.parent.mkdir(parents=True, exist_ok=True)
        html.write_text(build_html_body(daily), encoding="utf-8")
    if eml is not None:
        eml.parent.mkdir(parents=True, exist_ok=True)
        eml.write_bytes(bytes(build_message(daily, settings.email_from, settings.email_to)))
    if store:
        conn = get_connection(settings.db_path)
        init_schema(conn)
        try:
            n = store_daily_report(conn, as_of, daily.text, daily.stored_trades)
        finally:
            conn.close()
        log.info("trades_stored", count=n, db_path=settings.db_path)
    if print_report:
        typer.echo(daily.text)
    typer.echo(f"Report written to {path}")


@app.command("show")
def show(
    ctx: typer.Context,
    date: str = typer.Option(..., "--date", "-d", help="Report date YYYY-MM-DD"),
) -> None:
    """Print a stored daily report."""
    settings = ctx.obj["settings"]
    report_date = parse_date_option(date)
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        body = get_report(conn, report_date)
    finally:
        conn.close()
    if body is None:
        typer.echo(f"No report stored for {report_date.isoformat()}")
        raise typer.Exit(1)
    typer.echo(body)

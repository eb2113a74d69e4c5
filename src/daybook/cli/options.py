"""Shared option parsing for CLI commands."""

import datetime as dt

import typer


def parse_date_option(value: str | None) -> dt.date | None:
    """YYYY-MM-DD option value to a date; exits with a message when malformed."""
    if value is None:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        typer.echo(f"Invalid date {value!r}, expected YYYY-MM-DD", err=True)
        raise typer.Exit(1)

"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from daybook.config import get_settings
from daybook.config.settings import configure_logging

app = typer.Typer(
    name="daybook",
    help="Daybook - Daily order-book aggregation and settlement reports for linked accounts.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from daybook.cli import report, trades  # noqa: E402

app.add_typer(report.app, name="report")
app.add_typer(trades.app, name="trades")


def run() -> None:
    app()


if __name__ == "__main__":
    run()

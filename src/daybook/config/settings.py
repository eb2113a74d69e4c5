"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from daybook.models import AccountView

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"

DEFAULT_ACCOUNTS: dict[str, dict[str, Any]] = {
    "pew": {"client_code": "W1573"},
    "jpw": {"client_code": "J77302"},
}

# PEW split view, JPW unsplit, then PEW unsplit (report-only: same orders as the split view)
DEFAULT_VIEWS: list[dict[str, Any]] = [
    {"label": "PEW", "account": "pew", "shared": True, "store": True},
    {"label": "JPW", "account": "jpw", "shared": False, "store": True},
    {"label": "Actual PEW", "account": "pew", "shared": False, "store": False},
]


class ConfigError(ValueError):
    """Invalid configuration value."""


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir() -> Path:
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: str | Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = Path(config_dir) if config_dir else _find_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: str | Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        accounts: dict[str, Any] | None = None,
        views: list[dict[str, Any]] | None = None,
        report: dict[str, Any] | None = None,
        storage: dict[str, Any] | None = None,
        email: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.accounts = accounts or DEFAULT_ACCOUNTS
        self.views_raw = views or DEFAULT_VIEWS
        self.report = report or {}
        self.storage = storage or {}
        self.email = email or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            accounts=raw.get("accounts"),
            views=raw.get("views"),
            report=raw.get("report"),
            storage=raw.get("storage"),
            email=raw.get("email"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def db_path(self) -> str:
        return self.storage.get("db_path", "data/daybook.duckdb")

    @property
    def report_output_dir(self) -> str:
        return self.report.get("output_dir", "bkp")

    @property
    def attribution(self) -> str:
        return str(self.report.get("attribution", "last")).lower()

    @property
    def email_from(self) -> str:
        return self.email.get("from_address", "noreply@example.com")

    @property
    def email_to(self) -> list[str]:
        to = self.email.get("to_addresses") or []
        if isinstance(to, str):
            to = to.split(",")
        return [addr.strip() for addr in to if addr.strip()]

    def client_code(self, account: str) -> str:
        try:
            return str(self.accounts[account]["client_code"])
        except KeyError as e:
            raise ConfigError(f"No client_code configured for account {account!r}") from e

    def order_book_path(self, account: str) -> str:
        """Saved getOrderBook response for account (default data/response-<account>.json)."""
        return str(self.accounts.get(account, {}).get("order_book", f"data/response-{account}.json"))

    @property
    def view_sources(self) -> list[str]:
        """Accounts read by the configured views, first-seen order."""
        return list(dict.fromkeys(v.source for v in self.views))

    @property
    def views(self) -> list[AccountView]:
        """Account views in report order."""
        out = []
        for raw in self.views_raw:
            account = raw.get("account")
            if not account:
                raise ConfigError(f"View {raw.get('label')!r} has no account")
            out.append(
                AccountView(
                    label=str(raw.get("label") or account.upper()),
                    client_code=self.client_code(account),
                    is_shared_account=bool(raw.get("shared", False)),
                    store_trades=bool(raw.get("store", True)),
                    source=account,
                )
            )
        return out

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import sys

    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # loggers re-bind on every call, so a re-configured stream takes effect
        cache_logger_on_first_use=False,
    )

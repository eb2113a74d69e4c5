"""TOML config loading, profile overlay and account views."""

import pytest

from daybook.config import get_settings
from daybook.config.settings import ConfigError, Settings

DEFAULT_TOML = """
[accounts.alpha]
client_code = "A1"
order_book = "books/alpha.json"

[accounts.beta]
client_code = "B2"

[[views]]
label = "ALPHA"
account = "alpha"
shared = true

[[views]]
label = "BETA"
account = "beta"
store = false

[storage]
db_path = "db/default.duckdb"

[logging]
level = "warning"
"""

DEV_TOML = """
[storage]
db_path = "db/dev.duckdb"

[report]
attribution = "WEIGHTED_AVERAGE"
"""


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "default.toml").write_text(DEFAULT_TOML, encoding="utf-8")
    (tmp_path / "dev.toml").write_text(DEV_TOML, encoding="utf-8")
    return tmp_path


def test_defaults_without_config_files(tmp_path):
    settings = get_settings(config_dir=tmp_path)
    assert settings.db_path == "data/daybook.duckdb"
    assert settings.report_output_dir == "bkp"
    assert settings.attribution == "last"
    views = settings.views
    assert [(v.label, v.client_code, v.is_shared_account, v.store_trades) for v in views] == [
        ("PEW", "W1573", True, True),
        ("JPW", "J77302", False, True),
        ("Actual PEW", "W1573", False, False),
    ]
    assert settings.view_sources == ["pew", "jpw"]
    assert settings.order_book_path("jpw") == "data/response-jpw.json"


def test_views_from_config(config_dir):
    settings = get_settings(config_dir=config_dir)
    views = settings.views
    assert [v.label for v in views] == ["ALPHA", "BETA"]
    assert views[0].is_shared_account and views[0].store_trades
    assert not views[1].is_shared_account and not views[1].store_trades
    assert views[1].source == "beta"
    assert settings.order_book_path("alpha") == "books/alpha.json"
    assert settings.order_book_path("beta") == "data/response-beta.json"
    assert settings.logging_level == "WARNING"


def test_profile_overlay(config_dir):
    settings = get_settings("dev", config_dir)
    assert settings.db_path == "db/dev.duckdb"
    assert settings.attribution == "weighted_average"
    # untouched sections come from default.toml
    assert [v.label for v in settings.views] == ["ALPHA", "BETA"]


def test_unknown_profile_keeps_defaults(config_dir):
    assert get_settings("prod", config_dir).db_path == "db/default.duckdb"


def test_view_with_unknown_account_is_rejected():
    settings = Settings(views=[{"label": "X", "account": "nobody"}])
    with pytest.raises(ConfigError):
        settings.views


def test_email_addresses_accept_comma_string():
    settings = Settings(email={"to_addresses": "a@example.com, b@example.com,"})
    assert settings.email_to == ["a@example.com", "b@example.com"]

"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

SCHEMA_SQL = """
-- Aggregated trades, one row per order per client per report date
CREATE TABLE IF NOT EXISTS aggregated_trades (
    client_code       VARCHAR NOT NULL,
    trade_date        DATE NOT NULL,
    transaction_type  VARCHAR NOT NULL,
    ref_id            VARCHAR NOT NULL,
    security_id       VARCHAR NOT NULL,
    price             DECIMAL(38, 10) NOT NULL,
    quantity          DECIMAL(38, 10) NOT NULL,
    exchange_code     VARCHAR NOT NULL,
    trade_time        DATE,
    trade_type        VARCHAR,
    is_active         BOOLEAN NOT NULL DEFAULT TRUE,
    updated_at        BIGINT NOT NULL,
    PRIMARY KEY (client_code, trade_date, transaction_type, ref_id)
);

-- Rendered daily report text per as-of date
CREATE TABLE IF NOT EXISTS daily_reports (
    report_date       DATE PRIMARY KEY,
    body              VARCHAR NOT NULL,
    created_at        BIGINT NOT NULL
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager."""
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            conn.execute(stmt)

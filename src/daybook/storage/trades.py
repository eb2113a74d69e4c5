"""Aggregated trade and daily report persistence."""

from __future__ import annotations

import datetime as dt
import time
from typing import TYPE_CHECKING, Sequence

from daybook.models import AggregatedTrade

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_TRADE_COLUMNS = [
    "client_code",
    "trade_date",
    "transaction_type",
    "ref_id",
    "security_id",
    "price",
    "quantity",
    "exchange_code",
    "trade_time",
    "trade_type",
    "is_active",
]


def upsert_trade(conn: DuckDBPyConnection, trade: AggregatedTrade, updated_at: int | None = None) -> None:
    """Insert or replace one trade. Re-running a day overwrites rather than duplicates."""
    conn.execute(
        """
        INSERT INTO aggregated_trades (client_code, trade_date, transaction_type, ref_id, security_id, price, quantity, exchange_code, trade_time, trade_type, is_active, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT (client_code, trade_date, transaction_type, ref_id) DO UPDATE SET
            security_id = excluded.security_id,
            price = excluded.price,
            quantity = excluded.quantity,
            exchange_code = excluded.exchange_code,
            trade_time = excluded.trade_time,
            trade_type = excluded.trade_type,
            is_active = excluded.is_active,
            updated_at = excluded.updated_at
        """,
        [
            trade.client_code,
            trade.date,
            trade.transaction_type,
            trade.ref_id,
            trade.security_id,
            trade.price,
            trade.quantity,
            trade.exchange_code,
            trade.trade_time,
            trade.trade_type,
            trade.is_active,
            updated_at or int(time.time() * 1000),
        ],
    )


def upsert_trades(conn: DuckDBPyConnection, trades: Sequence[AggregatedTrade]) -> int:
    """Upsert multiple trades. Returns the number written."""
    now_ms = int(time.time() * 1000)
    for t in trades:
        upsert_trade(conn, t, updated_at=now_ms)
    return len(trades)


def list_trades(
    conn: DuckDBPyConnection,
    trade_date: dt.date | None = None,
    client_code: str | None = None,
) -> list[AggregatedTrade]:
    """Stored trades, optionally for one date and/or client, ordered like the report."""
    clauses = []
    params: list[object] = []
    if trade_date is not None:
        clauses.append("trade_date = ?")
        params.append(trade_date)
    if client_code is not None:
        clauses.append("client_code = ?")
        params.append(client_code)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    rows = conn.execute(
        f"""
        SELECT {', '.join(_TRADE_COLUMNS)} FROM aggregated_trades
        {where}
        ORDER BY trade_date, client_code, transaction_type, security_id, ref_id
        """,
        params,
    ).fetchall()
    out = []
    for r in rows:
        d = dict(zip(_TRADE_COLUMNS, r))
        d["date"] = d.pop("trade_date")
        out.append(AggregatedTrade(**d))
    return out


def save_report(conn: DuckDBPyConnection, report_date: dt.date, body: str) -> None:
    """Insert or replace the rendered daily report for report_date."""
    conn.execute(
        """
        INSERT INTO daily_reports (report_date, body, created_at) VALUES (?, ?, ?)
        ON CONFLICT (report_date) DO UPDATE SET body = excluded.body, created_at = excluded.created_at
        """,
        [report_date, body, int(time.time() * 1000)],
    )


def get_report(conn: DuckDBPyConnection, report_date: dt.date) -> str | None:
    row = conn.execute(
        "SELECT body FROM daily_reports WHERE report_date = ?", [report_date]
    ).fetchone()
    return row[0] if row else None


def store_daily_report(
    conn: DuckDBPyConnection,
    report_date: dt.date,
    body: str,
    trades: Sequence[AggregatedTrade],
) -> int:
    """Upsert the day's trades and its report in one transaction. Returns the number of trades written."""
    conn.begin()
    try:
        n = upsert_trades(conn, trades)
        save_report(conn, report_date, body)
    except Exception:
        conn.rollback()
        raise
    conn.commit()
    return n

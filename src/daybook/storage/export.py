"""Export aggregated trades to Parquet."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def export_trades_to_parquet(
    conn: DuckDBPyConnection,
    output_path: str | Path,
    trade_date: dt.date | None = None,
) -> int:
    """Export aggregated_trades to a Parquet file. Optional filter by trade_date. Returns row count."""
    path = Path(output_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path_str = str(path).replace("'", "''")
    if trade_date:
        conn.execute(
            f"COPY (SELECT * FROM aggregated_trades WHERE trade_date = DATE '{trade_date.isoformat()}' ORDER BY client_code, transaction_type, security_id) TO '{path_str}' (FORMAT PARQUET)",
        )
        count = conn.execute(
            "SELECT COUNT(*) FROM aggregated_trades WHERE trade_date = ?", [trade_date]
        ).fetchone()[0]
    else:
        conn.execute(
            f"COPY (SELECT * FROM aggregated_trades ORDER BY trade_date, client_code, transaction_type, security_id) TO '{path_str}' (FORMAT PARQUET)",
        )
        count = conn.execute("SELECT COUNT(*) FROM aggregated_trades").fetchone()[0]
    return count

"""Fixed-layout text rendering of aggregated trades and the daily file."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from daybook.aggregation.aggregator import AggregationResult
    from daybook.models import AggregatedTrade

REPORT_DATE_FORMAT = "%d-%b-%Y"
MONTH_FORMAT = "%b-%Y"

BUY_HEADER = "Buy Data ==========="
BUY_TOTAL_HEADER = "======TOTAL BUY======"
SELL_HEADER = "Sell Data ==========="
SELL_TOTAL_HEADER = "======TOTAL SELL======"


def format_report_date(day: dt.date) -> str:
    """19-Oct-2026."""
    return day.strftime(REPORT_DATE_FORMAT)


def format_number(value: Decimal | int | float) -> str:
    """Plain numeric form: no trailing zeros, no exponent, no rounding."""
    d = value if isinstance(value, Decimal) else Decimal(str(value))
    if d == 0:
        return "0"
    return format(d.normalize(), "f")


def render_trade_line(trade: AggregatedTrade) -> str:
    return ",".join(
        [
            format_report_date(trade.date),
            trade.security_id,
            format_number(trade.price),
            format_number(trade.quantity),
        ]
    )


def render_block(
    buys: Sequence[AggregatedTrade],
    sells: Sequence[AggregatedTrade],
    buy_total: Decimal,
    sell_total: Decimal,
) -> str:
    """Buy section, buy total, sell section, sell total. Empty sections render as an empty line."""
    lines = [
        BUY_HEADER,
        "\n".join(render_trade_line(t) for t in buys),
        BUY_TOTAL_HEADER,
        format_number(buy_total),
        SELL_HEADER,
        "\n".join(render_trade_line(t) for t in sells),
        SELL_TOTAL_HEADER,
        format_number(sell_total),
    ]
    return "\n".join(lines)


def section_header(label: str) -> str:
    return f"============={label}============="


def compose_daily_report(results: Iterable[AggregationResult]) -> str:
    """Concatenate per-view blocks under labelled headers, in the given order."""
    return "\n".join(f"{section_header(r.account.label)}\n{r.report}" for r in results)

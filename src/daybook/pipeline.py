"""Daily report run: aggregate each account view, compose the daily file, collect trades to store."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from daybook.aggregation import AggregationResult, AttributionPolicy, aggregate
from daybook.errors import MalformedRecordError, OrderBookError
from daybook.models import AccountView, AggregatedTrade, ExecutionRecord
from daybook.report.render import compose_daily_report

log = structlog.get_logger(__name__)


@dataclass
class DailyReport:
    """All sections of one daily run."""

    as_of: dt.date
    sections: list[AggregationResult] = field(default_factory=list)
    text: str = ""
    order_counts: dict[str, int] = field(default_factory=dict)

    @property
    def stored_trades(self) -> list[AggregatedTrade]:
        """Trades of the views marked for storage."""
        out: list[AggregatedTrade] = []
        for section in self.sections:
            if section.account.store_trades:
                out.extend(section.trades)
        return out

    def section(self, label: str) -> AggregationResult | None:
        for s in self.sections:
            if s.account.label == label:
                return s
        return None


def run_daily_report(
    order_books: Mapping[str, Sequence[ExecutionRecord | Mapping[str, Any]]],
    views: Sequence[AccountView],
    as_of: dt.date,
    policy: AttributionPolicy | str = AttributionPolicy.LAST,
) -> DailyReport:
    """Run aggregate() once per view, in view order, over the order book each view reads."""
    policy = AttributionPolicy(policy)
    report = DailyReport(
        as_of=as_of,
        order_counts={source: len(rows) for source, rows in order_books.items()},
    )
    for view in views:
        source = view.source or view.label
        if source not in order_books:
            raise OrderBookError(f"No order book loaded for {source!r} (view {view.label})")
        try:
            result = aggregate(order_books[source], view, as_of, policy)
        except MalformedRecordError as e:
            log.error("view_failed", view=view.label, client_code=view.client_code, error=str(e))
            raise
        for warning in result.warnings:
            log.info("empty_section", view=view.label, transaction_type=warning.transaction_type)
        log.info(
            "view_aggregated",
            view=view.label,
            client_code=view.client_code,
            shared=view.is_shared_account,
            buys=len(result.buys),
            sells=len(result.sells),
            buy_total=str(result.buy_total),
            sell_total=str(result.sell_total),
        )
        report.sections.append(result)
    report.text = compose_daily_report(report.sections)
    return report

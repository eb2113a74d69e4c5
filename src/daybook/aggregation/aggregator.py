"""Order-book aggregator - filter fills, group per (transaction_type, order_id), reconcile, total, render."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal
from enum import Enum
from typing import Any, Sequence

from pydantic import ValidationError

from daybook.errors import EmptyResultWarning, MalformedRecordError
from daybook.models import AccountView, AggregatedTrade, ExecutionRecord
from daybook.report.render import render_block

COMPLETE_STATUS = "complete"
TRANSACTION_TYPES = ("BUY", "SELL")
REQUIRED_FIELDS = ("filled_shares", "transaction_type", "order_id", "trading_symbol", "exchange")
# Averaged prices are quantized to this step before rendering and storage
PRICE_QUANTUM = Decimal("0.0001")


class AttributionPolicy(str, Enum):
    """Which fill(s) of an order supply its price and descriptive fields."""

    LAST = "last"
    FIRST = "first"
    WEIGHTED_AVERAGE = "weighted_average"  # price only; other fields from the last fill


@dataclass
class AggregationResult:
    """Aggregated trades and rendered block for one account view."""

    account: AccountView
    as_of: dt.date
    buys: list[AggregatedTrade] = field(default_factory=list)
    sells: list[AggregatedTrade] = field(default_factory=list)
    buy_total: Decimal = Decimal(0)
    sell_total: Decimal = Decimal(0)
    report: str = ""
    warnings: list[EmptyResultWarning] = field(default_factory=list)

    @property
    def trades(self) -> list[AggregatedTrade]:
        return self.buys + self.sells


def _raw_order_id(raw: Mapping[str, Any]) -> str | None:
    oid = raw.get("orderid", raw.get("order_id"))
    return None if oid is None else str(oid)


def _as_record(raw: ExecutionRecord | Mapping[str, Any], position: int) -> ExecutionRecord:
    if isinstance(raw, ExecutionRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedRecordError(
            position=position, reason=f"expected a mapping, got {type(raw).__name__}"
        )
    try:
        return ExecutionRecord.model_validate(dict(raw))
    except ValidationError as e:
        raise MalformedRecordError(
            order_id=_raw_order_id(raw), position=position, reason=str(e)
        ) from e


def _eligible(record: ExecutionRecord, position: int) -> bool:
    """True for completed fills with positive shares. Raises on a completed fill missing required fields."""
    if record.status is None:
        raise MalformedRecordError(order_id=record.order_id, position=position, missing=["status"])
    if record.status != COMPLETE_STATUS:
        return False
    missing = [name for name in REQUIRED_FIELDS if getattr(record, name) is None]
    if missing:
        raise MalformedRecordError(order_id=record.order_id, position=position, missing=missing)
    qty = record.filled_quantity
    if qty is None or qty <= 0:
        return False
    if record.transaction_type.strip().upper() not in TRANSACTION_TYPES:
        raise MalformedRecordError(
            order_id=record.order_id,
            position=position,
            reason=f"unknown transaction type {record.transaction_type!r}",
        )
    return True


def group_fills(
    records: Sequence[ExecutionRecord | Mapping[str, Any]],
) -> dict[str, dict[str, list[ExecutionRecord]]]:
    """Eligible fills keyed by transaction type, then order id, in first-seen order."""
    groups: dict[str, dict[str, list[ExecutionRecord]]] = {t: {} for t in TRANSACTION_TYPES}
    for position, raw in enumerate(records):
        record = _as_record(raw, position)
        if not _eligible(record, position):
            continue
        side = record.transaction_type.strip().upper()
        groups[side].setdefault(record.order_id, []).append(record)
    return groups


def reconcile_order(
    transaction_type: str,
    fills: Sequence[ExecutionRecord],
    account: AccountView,
    as_of: dt.date,
    policy: AttributionPolicy = AttributionPolicy.LAST,
) -> AggregatedTrade:
    """Collapse the fills of one order into a single trade. Quantities sum; attribution follows policy."""
    shares = [Decimal(f.filled_quantity) for f in fills]
    quantity = sum(shares, Decimal(0))
    attributed = fills[0] if policy is AttributionPolicy.FIRST else fills[-1]
    if policy is AttributionPolicy.WEIGHTED_AVERAGE:
        notional = sum(
            ((f.average_price or Decimal(0)) * q for f, q in zip(fills, shares)), Decimal(0)
        )
        price = (notional / quantity).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_EVEN)
    else:
        price = attributed.average_price or Decimal(0)
    if account.is_shared_account:
        quantity = quantity / 2
    return AggregatedTrade(
        date=as_of,
        client_code=account.client_code,
        transaction_type=transaction_type,
        security_id=attributed.security_id,
        price=price,
        quantity=quantity,
        exchange_code=attributed.exchange_code,
        ref_id=attributed.order_id,
        trade_time=attributed.trade_date,
        trade_type=attributed.product_type,
        is_active=True,
    )


def total_value(trades: Sequence[AggregatedTrade], account: AccountView) -> Decimal:
    """Sum of price x quantity; a shared account counts each halved quantity twice to restore the full position."""
    factor = 2 if account.is_shared_account else 1
    return sum((t.price * (t.quantity * factor) for t in trades), Decimal(0))


def aggregate(
    records: Sequence[ExecutionRecord | Mapping[str, Any]],
    account: AccountView,
    as_of: dt.date,
    policy: AttributionPolicy = AttributionPolicy.LAST,
) -> AggregationResult:
    """Aggregate one order book for one account view. Pure: no I/O, no logging."""
    policy = AttributionPolicy(policy)
    result = AggregationResult(account=account, as_of=as_of)
    buckets = {"BUY": result.buys, "SELL": result.sells}
    for side, orders in group_fills(records).items():
        for fills in orders.values():
            buckets[side].append(reconcile_order(side, fills, account, as_of, policy))
        # list.sort is stable: equal symbols keep first-seen order
        buckets[side].sort(key=lambda t: t.security_id)
        if not buckets[side]:
            result.warnings.append(EmptyResultWarning(account.label, side))
    result.buy_total = total_value(result.buys, account)
    result.sell_total = total_value(result.sells, account)
    result.report = render_block(result.buys, result.sells, result.buy_total, result.sell_total)
    return result

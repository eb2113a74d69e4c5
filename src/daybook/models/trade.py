"""AggregatedTrade - one reconciled order per (transaction_type, order_id)."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class AggregatedTrade(BaseModel):
    """Order reconciled from its fills, as reported for one account view."""

    date: dt.date  # as-of date of the run, same for every trade
    client_code: str
    transaction_type: str = Field(..., pattern="^(BUY|SELL)$")
    security_id: str
    price: Decimal
    quantity: Decimal  # halved for shared accounts
    exchange_code: str = Field(..., pattern="^(N|B)$")
    ref_id: str
    trade_time: dt.date | None = None  # from the attributed fill's exchange timestamp
    trade_type: str | None = None
    is_active: bool = True

    @property
    def value(self) -> Decimal:
        return self.price * self.quantity

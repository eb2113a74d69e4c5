"""ExecutionRecord, AccountView - broker fills and the account a report is rendered for."""

from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

EXECUTION_TIME_FORMAT = "%d-%b-%Y %H:%M:%S"
PRIMARY_EXCHANGE = "NSE"
SYMBOL_SUFFIX = "-EQ"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_shares(value: Any) -> int | None:
    """Integer prefix of a share count ("10", 10, 10.0, " 7 lots" -> 7). None when not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return None
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def parse_execution_date(value: str | None) -> dt.date | None:
    """Calendar date of a broker exchange timestamp (DD-MMM-YYYY HH:MM:SS)."""
    if not value:
        return None
    try:
        return dt.datetime.strptime(value.strip(), EXECUTION_TIME_FORMAT).date()
    except ValueError:
        return None


class ExecutionRecord(BaseModel):
    """One fill from the broker order book. Accepts broker keys (filledshares, orderid, ...)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: str | None = None
    filled_shares: int | float | str | None = Field(None, alias="filledshares")
    transaction_type: str | None = Field(None, alias="transactiontype")
    order_id: str | None = Field(None, alias="orderid")
    trading_symbol: str | None = Field(None, alias="tradingsymbol")
    exchange: str | None = None
    average_price: Decimal | None = Field(None, alias="averageprice")
    execution_time: str | None = Field(None, alias="exchtime")
    product_type: str | None = Field(None, alias="producttype")

    @field_validator(
        "status",
        "transaction_type",
        "order_id",
        "trading_symbol",
        "exchange",
        "execution_time",
        "product_type",
        mode="before",
    )
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("filled_shares", mode="before")
    @classmethod
    def _shares(cls, v: Any) -> Any:
        # Anything non-scalar is kept as text so parse_shares reports it as non-numeric
        if v is None or isinstance(v, (int, float, str)):
            return v
        return str(v)

    @field_validator("average_price", mode="before")
    @classmethod
    def _price(cls, v: Any) -> Any:
        # Prices are passed through; an unparseable one is treated as absent
        if v is None or isinstance(v, (bool, dict, list)):
            return None
        try:
            d = Decimal(str(v).strip())
        except InvalidOperation:
            return None
        return d if d.is_finite() else None

    @property
    def filled_quantity(self) -> int | None:
        return parse_shares(self.filled_shares)

    @property
    def security_id(self) -> str:
        return (self.trading_symbol or "").strip().replace(SYMBOL_SUFFIX, "", 1)

    @property
    def exchange_code(self) -> str:
        return "N" if self.exchange == PRIMARY_EXCHANGE else "B"

    @property
    def trade_date(self) -> dt.date | None:
        return parse_execution_date(self.execution_time)


class AccountView(BaseModel):
    """How one order book is rendered: which client, shared (halved) or not, stored or report-only."""

    model_config = ConfigDict(frozen=True)

    label: str
    client_code: str
    is_shared_account: bool = False
    store_trades: bool = True
    source: str = ""  # order-book key the view reads; defaults to label

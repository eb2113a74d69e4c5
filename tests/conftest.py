"""Shared fixtures: broker fill payloads and structlog isolation."""

import datetime as dt

import pytest
import structlog

from daybook.models import AccountView

AS_OF = dt.date(2026, 10, 19)


def fill(
    order_id="O1",
    side="BUY",
    symbol="TCS-EQ",
    shares=5,
    price=100,
    status="complete",
    exchange="NSE",
    exchtime="19-Oct-2026 10:15:00",
    product="DELIVERY",
):
    """One getOrderBook row with the broker's own key names."""
    return {
        "status": status,
        "filledshares": str(shares),
        "transactiontype": side,
        "orderid": order_id,
        "tradingsymbol": symbol,
        "exchange": exchange,
        "averageprice": price,
        "exchtime": exchtime,
        "producttype": product,
    }


@pytest.fixture
def plain_view():
    return AccountView(label="JPW", client_code="J77302")


@pytest.fixture
def shared_view():
    return AccountView(label="PEW", client_code="W1573", is_shared_account=True)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()

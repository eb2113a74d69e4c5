"""Order-book payload loading - broker getOrderBook responses saved as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from daybook.errors import OrderBookError

log = structlog.get_logger(__name__)


def extract_records(payload: Any) -> list[dict[str, Any]]:
    """Fill records from a broker envelope ({"status": true, "data": [...]}) or a bare list.

    A null/absent "data" is an empty book (the broker returns null when there were no orders).
    """
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        if payload.get("status") is False:
            raise OrderBookError(f"Order book request failed: {payload.get('message') or 'unknown error'}")
        rows = payload.get("data") or []
    else:
        raise OrderBookError(f"Unexpected order book payload type: {type(payload).__name__}")
    if not isinstance(rows, list):
        raise OrderBookError("Order book 'data' is not a list")
    return rows


def load_order_book(path: str | Path) -> list[dict[str, Any]]:
    """Read an order-book JSON file and return its fill records."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise OrderBookError(f"Order book file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise OrderBookError(f"Order book file is not valid JSON: {path} ({e})") from e
    rows = extract_records(payload)
    log.info("order_book_loaded", path=str(path), records=len(rows))
    return rows

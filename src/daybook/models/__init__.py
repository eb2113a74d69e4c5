"""Canonical schema (Pydantic) - ExecutionRecord, AccountView, AggregatedTrade."""

from daybook.models.execution import AccountView, ExecutionRecord
from daybook.models.trade import AggregatedTrade

__all__ = [
    "AccountView",
    "ExecutionRecord",
    "AggregatedTrade",
]

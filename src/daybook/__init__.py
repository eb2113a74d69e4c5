"""Daybook - daily order-book aggregation and settlement reports."""

__version__ = "0.1.0"

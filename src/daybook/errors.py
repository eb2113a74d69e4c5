"""Domain errors and warnings."""

from __future__ import annotations


class DaybookError(Exception):
    """Base class for daybook errors."""


class MalformedRecordError(DaybookError, ValueError):
    """A completed execution record is missing a structurally required field."""

    def __init__(
        self,
        *,
        order_id: str | None = None,
        position: int | None = None,
        missing: list[str] | None = None,
        reason: str | None = None,
    ) -> None:
        self.order_id = order_id
        self.position = position
        self.missing = list(missing or [])
        self.reason = reason
        if order_id is not None:
            where = f"order {order_id}"
        else:
            where = f"record at position {position}"
        detail = reason or f"missing required field(s): {', '.join(self.missing)}"
        super().__init__(f"Malformed execution record ({where}): {detail}")


class OrderBookError(DaybookError):
    """Order-book payload could not be read or decoded."""


class EmptyResultWarning(UserWarning):
    """A transaction-type bucket produced no trades. Non-fatal; reported as an empty section."""

    def __init__(self, label: str, transaction_type: str) -> None:
        self.label = label
        self.transaction_type = transaction_type
        super().__init__(f"{label}: no {transaction_type} trades")

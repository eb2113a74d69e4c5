"""Email bodies for the daily report - plain text and an HTML wrapper of the same report string."""

from __future__ import annotations

import datetime as dt
import html
from email.message import EmailMessage
from typing import TYPE_CHECKING, Any, Sequence

from daybook.report.render import format_report_date

if TYPE_CHECKING:
    from daybook.pipeline import DailyReport

SUBJECT_PREFIX = "Trade Report"
FOOTER = "Generated automatically by the daybook trade report job"


def build_summary(report: DailyReport) -> dict[str, Any]:
    """Order counts per order book and buy/sell counts over the stored trades."""
    trades = report.stored_trades
    return {
        "orders": dict(report.order_counts),
        "buy_transactions": sum(1 for t in trades if t.transaction_type == "BUY"),
        "sell_transactions": sum(1 for t in trades if t.transaction_type == "SELL"),
    }


def build_subject(as_of: dt.date) -> str:
    return f"{SUBJECT_PREFIX} - {format_report_date(as_of)}"


def _summary_lines(summary: dict[str, Any]) -> list[str]:
    lines = [f"{source} orders: {count}" for source, count in summary["orders"].items()]
    lines.append(f"Buy transactions: {summary['buy_transactions']}")
    lines.append(f"Sell transactions: {summary['sell_transactions']}")
    return lines


def build_text_body(report: DailyReport, generated_at: dt.datetime | None = None) -> str:
    summary = build_summary(report)
    parts = [
        f"Trade report for {format_report_date(report.as_of)}",
        "",
        "Summary:",
        *(f"- {line}" for line in _summary_lines(summary)),
        "",
        "Detailed report:",
        report.text,
        "",
        "---",
        FOOTER,
    ]
    if generated_at is not None:
        parts.append(f"Execution time: {generated_at.isoformat()}")
    return "\n".join(parts)


def build_html_body(report: DailyReport, generated_at: dt.datetime | None = None) -> str:
    """Same content as the text body; the report itself goes in a <pre> block, escaped."""
    summary = build_summary(report)
    items = "".join(f"<li>{html.escape(line)}</li>" for line in _summary_lines(summary))
    date_str = html.escape(format_report_date(report.as_of))
    generated = (
        f"<p><strong>Generated:</strong> {html.escape(generated_at.isoformat())}</p>"
        if generated_at is not None
        else ""
    )
    return (
        "<!DOCTYPE html>\n"
        "<html><head><meta charset=\"utf-8\"><style>"
        "body { font-family: Arial, sans-serif; margin: 20px; }"
        ".report { background-color: #f8f8f8; padding: 15px; font-family: monospace; white-space: pre-wrap; }"
        "</style></head><body>"
        f"<h1>{html.escape(SUBJECT_PREFIX)}</h1>"
        f"<p><strong>Date:</strong> {date_str}</p>"
        f"{generated}"
        f"<h2>Summary</h2><ul>{items}</ul>"
        f"<h2>Detailed report</h2><pre class=\"report\">{html.escape(report.text)}</pre>"
        f"<p><em>{html.escape(FOOTER)}</em></p>"
        "</body></html>"
    )


def build_message(
    report: DailyReport,
    from_address: str,
    to_addresses: Sequence[str],
    generated_at: dt.datetime | None = None,
) -> EmailMessage:
    """multipart/alternative message (text + HTML). Sending it is left to the caller."""
    msg = EmailMessage()
    msg["Subject"] = build_subject(report.as_of)
    msg["From"] = from_address
    if to_addresses:
        msg["To"] = ", ".join(to_addresses)
    msg.set_content(build_text_body(report, generated_at))
    msg.add_alternative(build_html_body(report, generated_at), subtype="html")
    return msg

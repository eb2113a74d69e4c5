"""Daily run over the three standard views, and the email bodies built from it."""

import pytest

from conftest import AS_OF, fill
from daybook.config import Settings
from daybook.errors import MalformedRecordError, OrderBookError
from daybook.pipeline import run_daily_report
from daybook.report.mail import (
    build_html_body,
    build_message,
    build_subject,
    build_summary,
    build_text_body,
)


@pytest.fixture
def order_books():
    pew = [
        fill(order_id="P1", symbol="TCS-EQ", shares=5, price=3400),
        fill(order_id="P1", symbol="TCS-EQ", shares=5, price=3400),
        fill(order_id="P2", side="SELL", symbol="INFY-EQ", shares=3, price=1500),
        fill(order_id="P3", status="rejected"),
    ]
    jpw = [
        fill(order_id="J1", symbol="ITC-EQ", shares=10, price=450),
    ]
    return {"pew": pew, "jpw": jpw}


@pytest.fixture
def views():
    return Settings().views


def test_sections_follow_view_order(order_books, views):
    daily = run_daily_report(order_books, views, AS_OF)
    assert [s.account.label for s in daily.sections] == ["PEW", "JPW", "Actual PEW"]
    assert daily.text.startswith("=============PEW=============\nBuy Data ===========\n")
    assert "\n=============JPW=============\n" in daily.text
    assert "\n=============Actual PEW=============\n" in daily.text
    assert daily.order_counts == {"pew": 4, "jpw": 1}


def test_split_and_actual_views_agree_on_totals(order_books, views):
    daily = run_daily_report(order_books, views, AS_OF)
    pew = daily.section("PEW")
    actual = daily.section("Actual PEW")
    assert pew.buys[0].quantity == 5
    assert actual.buys[0].quantity == 10
    assert pew.buy_total == actual.buy_total == 34000
    assert pew.sell_total == actual.sell_total == 4500


def test_stored_trades_skip_report_only_view(order_books, views):
    daily = run_daily_report(order_books, views, AS_OF)
    stored = daily.stored_trades
    assert {(t.client_code, t.ref_id) for t in stored} == {("W1573", "P1"), ("W1573", "P2"), ("J77302", "J1")}
    keys = [(t.client_code, t.transaction_type, t.ref_id) for t in stored]
    assert len(keys) == len(set(keys))


def test_view_order_does_not_change_sections(order_books, views):
    forward = run_daily_report(order_books, views, AS_OF)
    backward = run_daily_report(order_books, list(reversed(views)), AS_OF)
    for section in forward.sections:
        assert backward.section(section.account.label).report == section.report


def test_missing_order_book_raises(order_books, views):
    del order_books["jpw"]
    with pytest.raises(OrderBookError):
        run_daily_report(order_books, views, AS_OF)


def test_malformed_record_aborts_run(order_books, views):
    bad = fill(order_id="J2")
    del bad["filledshares"]
    order_books["jpw"].append(bad)
    with pytest.raises(MalformedRecordError) as exc:
        run_daily_report(order_books, views, AS_OF)
    assert exc.value.order_id == "J2"


def test_email_bodies_wrap_the_same_report(order_books, views):
    daily = run_daily_report(order_books, views, AS_OF)
    summary = build_summary(daily)
    assert summary == {"orders": {"pew": 4, "jpw": 1}, "buy_transactions": 2, "sell_transactions": 1}
    assert build_subject(AS_OF) == "Trade Report - 19-Oct-2026"

    text = build_text_body(daily)
    assert daily.text in text
    assert "- Buy transactions: 2" in text

    html = build_html_body(daily)
    assert html.startswith("<!DOCTYPE html>")
    assert "<li>pew orders: 4</li>" in html
    assert "=============Actual PEW=============" in html
    assert "<pre class=\"report\">" in html


def test_html_body_escapes_report_text(views):
    daily = run_daily_report({"pew": [fill(symbol="M&M-EQ")], "jpw": []}, views, AS_OF)
    html = build_html_body(daily)
    assert "M&amp;M" in html
    assert "M&M" not in html


def test_build_message_has_text_and_html_parts(order_books, views):
    daily = run_daily_report(order_books, views, AS_OF)
    msg = build_message(daily, "reports@example.com", ["a@example.com", "b@example.com"])
    assert msg["Subject"] == "Trade Report - 19-Oct-2026"
    assert msg["To"] == "a@example.com, b@example.com"
    assert msg.get_body(preferencelist=("plain",)).get_content().startswith("Trade report for 19-Oct-2026")
    assert "<!DOCTYPE html>" in msg.get_body(preferencelist=("html",)).get_content()

from __future__ import annotations

from datetime import date, datetime

import pytest

from tradejournal.services import reports
from tradejournal.services.records import Trade


def make_trade(idx: int, pnl: float, **fields) -> Trade:
    values = {"date": date(2024, 1, 1), "symbol": "EURUSD", "pnl": pnl}
    values.update(fields)
    return Trade(id=f"t{idx}", **values)


def test_aggregate_groups_and_sorts_by_pnl():
    trades = [
        make_trade(0, 10, symbol="AAPL"),
        make_trade(1, 40, symbol="EURUSD"),
        make_trade(2, -5, symbol="AAPL"),
    ]

    rows = reports.aggregate(trades, reports.by_symbol)

    assert rows == [
        reports.ReportRow(label="EURUSD", trades=1, pnl=40),
        reports.ReportRow(label="AAPL", trades=2, pnl=5),
    ]


def test_aggregate_net_and_gross_modes():
    trades = [make_trade(0, 100, commission=10)]

    assert reports.aggregate(trades, reports.by_symbol, "net")[0].pnl == 90
    assert reports.aggregate(trades, reports.by_symbol, "gross")[0].pnl == 100
    with pytest.raises(ValueError):
        reports.aggregate(trades, reports.by_symbol, "tax")


def test_multi_label_keys_count_trade_in_each_group():
    trades = [make_trade(0, 10, tags=("trend", "news")), make_trade(1, -2, tags=("news",)), make_trade(2, 3)]

    rows = {row.label: row for row in reports.aggregate(trades, reports.by_tag)}

    assert set(rows) == {"TREND", "NEWS"}
    assert rows["NEWS"].trades == 2
    assert rows["NEWS"].pnl == 8


def test_calendar_keys():
    trade = make_trade(0, 1, date=date(2024, 3, 8), entry_time=datetime(2024, 3, 8, 9, 45))

    assert reports.by_weekday(trade) == "Friday"
    assert reports.by_week(trade) == "Week 10"
    assert reports.by_month(trade) == "March"
    assert reports.by_hour(trade) == "9:00"
    assert reports.by_hour(make_trade(1, 1)) == "0:00"


@pytest.mark.parametrize(
    ("minutes", "label"),
    [(0, "Under 1 min"), (1, "1-5 min"), (14, "5-15 min"), (60, "1-2 hours"), (240, "2 hours+")],
)
def test_duration_buckets(minutes, label):
    assert reports.by_duration(make_trade(0, 1, duration=minutes)) == label


def test_price_and_volume_buckets():
    assert reports.by_price(make_trade(0, 1, entry_price=1.05)) == "$0 - $50"
    assert reports.by_price(make_trade(0, 1, entry_price=150)) == "$100 - $200"
    assert reports.by_price(make_trade(0, 1, entry_price=42000)) == "$500+"
    assert reports.by_volume(make_trade(0, 1, quantity=0.05)) == "0 - 0.1"
    assert reports.by_volume(make_trade(0, 1, quantity=3)) == "2.0+"


def test_setup_and_sector_keys():
    assert reports.by_setup(make_trade(0, 1)) == reports.NO_SETUP
    assert reports.by_setup(make_trade(0, 1, setup="Breakout")) == "Breakout"
    assert reports.by_sector(make_trade(0, 1, symbol="XAUUSD")) == "Commodities"
    assert reports.by_sector(make_trade(0, 1, symbol="AAPL")) == reports.DEFAULT_SECTOR


def test_summarize_reports_profits_and_losses():
    trades = [
        make_trade(0, 30, quantity=1, setup="Breakout"),
        make_trade(1, -10, quantity=2, setup="Breakout"),
        make_trade(2, 5, quantity=1),
    ]

    rows = reports.summarize(trades, reports.by_setup)

    assert [row.label for row in rows] == ["Breakout", reports.NO_SETUP]
    breakout = rows[0]
    assert breakout.net_profit == 20
    assert breakout.win_rate == 50.0
    assert breakout.total_profits == 30
    assert breakout.total_loss == 10
    assert breakout.trades == 2
    assert breakout.volume == 3


def test_report_categories():
    assert list(reports.REPORT_CATEGORIES)[:3] == ["days", "weeks", "months"]
    assert len(reports.REPORT_CATEGORIES) == 12
    assert reports.REPORT_CATEGORIES[reports.DEFAULT_CATEGORY].title == "HOUR"

from __future__ import annotations

from datetime import date

from tradejournal.services.calendar_view import calendar_month, day_summary
from tradejournal.services.records import Trade


def make_trade(idx: int, day: date, pnl: float, **fields) -> Trade:
    return Trade(id=f"t{idx}", date=day, symbol="EURUSD", pnl=pnl, **fields)


def test_day_summary_collects_tags_then_setups():
    day = date(2024, 3, 5)
    trades = [
        make_trade(0, day, 20, commission=2, tags=("trend",), setup="Breakout"),
        make_trade(1, day, -5, tags=("trend", "news")),
        make_trade(2, date(2024, 3, 6), 100),
    ]

    summary = day_summary(trades, day)

    assert [trade.id for trade in summary.trades] == ["t0", "t1"]
    assert summary.pnl == 13
    assert summary.labels == ["TREND", "NEWS", "Breakout"]


def test_calendar_month_weeks_start_on_sunday():
    trades = [
        make_trade(0, date(2024, 3, 1), 10),
        make_trade(1, date(2024, 3, 3), -4),
        make_trade(2, date(2024, 3, 4), 6),
        make_trade(3, date(2024, 4, 1), 1000),
    ]

    month = calendar_month(trades, 2024, 3)

    assert month.pnl == 12
    assert [day.date for day in month.days] == [date(2024, 3, 1), date(2024, 3, 3), date(2024, 3, 4)]
    # March 1st 2024 is a Friday.
    assert month.weeks[0].days == [0, 0, 0, 0, 0, 1, 2]
    assert month.weeks[0].pnl == 10
    assert month.weeks[1].days[0] == 3
    assert month.weeks[1].pnl == 2
    assert month.weeks[1].trades == 2
    assert sum(week.trades for week in month.weeks) == 3


def test_empty_month():
    month = calendar_month([], 2024, 2)

    assert month.pnl == 0
    assert month.days == []
    assert all(week.trades == 0 for week in month.weeks)

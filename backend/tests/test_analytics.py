from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from tradejournal.services import analytics
from tradejournal.services.records import Trade

_BASE_DAY = date(2024, 1, 1)


def make_trade(idx: int, pnl: float, *, commission: float = 0.0, day: date | None = None, **extra) -> Trade:
    return Trade(
        id=f"t{idx}",
        date=day or _BASE_DAY + timedelta(days=idx),
        symbol=extra.pop("symbol", "EURUSD"),
        pnl=pnl,
        commission=commission,
        **extra,
    )


def series(*pnls: float) -> list[Trade]:
    return [make_trade(idx, pnl) for idx, pnl in enumerate(pnls)]


def test_empty_inputs_are_zero():
    assert analytics.total_pnl([]) == 0
    assert analytics.win_rate([]) == 0
    assert analytics.profit_factor([]) == 0
    assert analytics.max_drawdown([]) == 0
    assert analytics.average_rr([]) == 0
    assert analytics.daily_pnl([]) == []
    assert analytics.best_worst_trades([]) == analytics.BestWorst(best=None, worst=None)
    assert analytics.streaks([]) == analytics.Streaks(0, 0, 0)


def test_total_pnl_is_net_of_commission():
    trades = [make_trade(0, 100, commission=5), make_trade(1, -20, commission=1)]

    assert analytics.total_pnl(trades) == 74


def test_win_rate_counts_gross_winners():
    trades = [make_trade(0, 1, commission=5), make_trade(1, -3), make_trade(2, 0), make_trade(3, 8)]

    assert analytics.win_rate(trades) == 50.0


def test_profit_factor():
    assert analytics.profit_factor(series(30, -10, -5)) == pytest.approx(2.0)
    assert math.isinf(analytics.profit_factor(series(10, 5)))
    assert analytics.profit_factor(series(0, 0)) == 0


def test_daily_pnl_is_sorted_and_cumulative():
    day1, day2 = date(2024, 1, 2), date(2024, 1, 3)
    trades = [
        make_trade(0, 50, day=day2),
        make_trade(1, 10, commission=2, day=day1),
        make_trade(2, -30, day=day1),
    ]

    points = analytics.daily_pnl(trades)

    assert [point.date for point in points] == [day1, day2]
    assert [point.pnl for point in points] == [-22, 50]
    assert [point.cumulative for point in points] == [-22, 28]


def test_max_drawdown_measures_from_running_peak():
    assert analytics.max_drawdown(series(100, -30, -50, 40, -90)) == 130
    assert analytics.max_drawdown(series(10, 20, 30)) == 0


def test_max_drawdown_counts_losses_from_zero_start():
    assert analytics.max_drawdown(series(-40, 10)) == 40


def test_average_rr():
    assert analytics.average_rr(series(30, 10, -10)) == pytest.approx(2.0)
    assert analytics.average_rr(series(30, 10)) == 0


def test_performance_by_tag_counts_each_tag():
    trades = [
        make_trade(0, 10, tags=("trend", "breakout")),
        make_trade(1, -4, tags=("TREND",)),
        make_trade(2, 7),
    ]

    rows = analytics.performance_by_tag(trades)

    assert [row.tag for row in rows] == ["TREND", "BREAKOUT"]
    assert rows[0] == analytics.TagPerformance(tag="TREND", pnl=6, count=2, win_rate=50.0)
    assert rows[1].count == 1


def test_performance_by_symbol_is_sorted_by_pnl():
    trades = [
        make_trade(0, -5, symbol="AAPL"),
        make_trade(1, 20, symbol="EURUSD"),
        make_trade(2, 5, symbol="AAPL"),
    ]

    rows = analytics.performance_by_symbol(trades)

    assert [row.symbol for row in rows] == ["EURUSD", "AAPL"]
    assert rows[1].pnl == 0
    assert rows[1].win_rate == 50.0


def test_best_worst_keep_first_on_ties():
    trades = series(10, -5, 10, -5)

    best_worst = analytics.best_worst_trades(trades)

    assert best_worst.best.id == "t0"
    assert best_worst.worst.id == "t1"


def test_streaks():
    result = analytics.streaks(series(10, 5, -3, -2, -1, 7))

    assert result.current_streak == 1
    assert result.longest_win_streak == 2
    assert result.longest_loss_streak == 3


def test_streaks_current_losing_run_is_negative():
    assert analytics.streaks(series(4, -1, -2)).current_streak == -2


def test_streaks_follow_date_order():
    trades = [make_trade(0, -1, day=date(2024, 1, 5)), make_trade(1, 3, day=date(2024, 1, 1))]

    assert analytics.streaks(trades).current_streak == -1


def test_scratch_trades_do_not_break_runs():
    result = analytics.streaks(series(5, 0, 6, 0))

    assert result.longest_win_streak == 2
    assert result.current_streak == 0


def test_trades_by_date():
    day = date(2024, 1, 3)
    trades = series(1, 2, 3)

    assert [trade.id for trade in analytics.trades_by_date(trades, day)] == ["t2"]


def test_trade_summary_counts_scratch_as_loser():
    summary = analytics.trade_summary(series(30, 10, -20, 0))

    assert summary.total_trades == 4
    assert summary.winners == 2
    assert summary.losers == 2
    assert summary.average_winner == 20
    assert summary.average_loser == 10


def test_dashboard_summary_combines_metrics():
    trades = series(30, -10)

    dashboard = analytics.dashboard_summary(trades)

    assert dashboard.total_pnl == 20
    assert dashboard.win_rate == 50.0
    assert dashboard.profit_factor == 3.0
    assert dashboard.max_drawdown == 10
    assert dashboard.best_worst.best.id == "t0"
    assert len(dashboard.daily_pnl) == 2


def test_functions_do_not_mutate_input():
    trades = tuple(series(5, -2, 7))

    analytics.dashboard_summary(trades)

    assert [trade.id for trade in trades] == ["t0", "t1", "t2"]

"""Trade performance statistics.

Every function here is pure: it takes a snapshot of trades and returns plain
values, never mutating its input. Net P&L (``pnl - commission``) is used for
money totals, while wins and losses are decided on gross ``pnl``. Empty
inputs and zero denominators map to 0 (or ``inf`` for an undefeated profit
factor) instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from tradejournal.services.records import Trade


@dataclass(frozen=True)
class DailyPnL:
    date: date
    pnl: float
    cumulative: float


@dataclass(frozen=True)
class TagPerformance:
    tag: str
    pnl: float
    count: int
    win_rate: float


@dataclass(frozen=True)
class SymbolPerformance:
    symbol: str
    pnl: float
    count: int
    win_rate: float


@dataclass(frozen=True)
class BestWorst:
    best: Optional[Trade]
    worst: Optional[Trade]


@dataclass(frozen=True)
class Streaks:
    current_streak: int
    longest_win_streak: int
    longest_loss_streak: int


@dataclass(frozen=True)
class TradeSummary:
    total_trades: int
    winners: int
    losers: int
    average_winner: float
    average_loser: float


@dataclass(frozen=True)
class DashboardSummary:
    total_pnl: float
    win_rate: float
    profit_factor: float
    max_drawdown: float
    average_rr: float
    summary: TradeSummary
    streaks: Streaks
    best_worst: BestWorst
    daily_pnl: List[DailyPnL]
    performance_by_symbol: List[SymbolPerformance]


def net_pnl(trade: Trade) -> float:
    return trade.pnl - trade.commission


def total_pnl(trades: Sequence[Trade]) -> float:
    return sum(net_pnl(trade) for trade in trades)


def _win_rate(wins: int, count: int) -> float:
    if not count:
        return 0.0
    return wins / count * 100


def win_rate(trades: Sequence[Trade]) -> float:
    return _win_rate(sum(1 for trade in trades if trade.pnl > 0), len(trades))


def profit_factor(trades: Sequence[Trade]) -> float:
    profits = sum(trade.pnl for trade in trades if trade.pnl > 0)
    losses = abs(sum(trade.pnl for trade in trades if trade.pnl < 0))
    if losses == 0:
        return math.inf if profits > 0 else 0.0
    return profits / losses


def daily_pnl(trades: Sequence[Trade]) -> List[DailyPnL]:
    by_date: Dict[date, float] = {}
    for trade in trades:
        by_date[trade.date] = by_date.get(trade.date, 0.0) + net_pnl(trade)

    points: List[DailyPnL] = []
    cumulative = 0.0
    for day in sorted(by_date):
        cumulative += by_date[day]
        points.append(DailyPnL(date=day, pnl=by_date[day], cumulative=cumulative))
    return points


def max_drawdown(trades: Sequence[Trade]) -> float:
    peak = 0.0
    drawdown = 0.0
    for point in daily_pnl(trades):
        peak = max(peak, point.cumulative)
        drawdown = max(drawdown, peak - point.cumulative)
    return drawdown


def average_rr(trades: Sequence[Trade]) -> float:
    wins = [trade.pnl for trade in trades if trade.pnl > 0]
    losses = [trade.pnl for trade in trades if trade.pnl < 0]
    if not wins or not losses:
        return 0.0
    return (sum(wins) / len(wins)) / abs(sum(losses) / len(losses))


def _group_stats(groups: Dict[str, List[Trade]]) -> List[Tuple[str, float, int, float]]:
    stats = []
    for label, members in groups.items():
        wins = sum(1 for trade in members if trade.pnl > 0)
        stats.append((label, total_pnl(members), len(members), _win_rate(wins, len(members))))
    return stats


def performance_by_tag(trades: Sequence[Trade]) -> List[TagPerformance]:
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        for tag in trade.tags:
            groups.setdefault(tag, []).append(trade)
    return [
        TagPerformance(tag=label, pnl=pnl, count=count, win_rate=rate)
        for label, pnl, count, rate in _group_stats(groups)
    ]


def performance_by_symbol(trades: Sequence[Trade]) -> List[SymbolPerformance]:
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        groups.setdefault(trade.symbol, []).append(trade)
    rows = [
        SymbolPerformance(symbol=label, pnl=pnl, count=count, win_rate=rate)
        for label, pnl, count, rate in _group_stats(groups)
    ]
    rows.sort(key=lambda row: row.pnl, reverse=True)
    return rows


def best_worst_trades(trades: Sequence[Trade]) -> BestWorst:
    if not trades:
        return BestWorst(best=None, worst=None)
    best = worst = trades[0]
    for trade in trades[1:]:
        if trade.pnl > best.pnl:
            best = trade
        if trade.pnl < worst.pnl:
            worst = trade
    return BestWorst(best=best, worst=worst)


def streaks(trades: Sequence[Trade]) -> Streaks:
    wins = losses = 0
    longest_wins = longest_losses = 0
    ordered = sorted(trades, key=lambda trade: trade.date)

    # Scratch trades (pnl == 0) neither extend nor break a run.
    for trade in ordered:
        if trade.pnl > 0:
            wins += 1
            losses = 0
            longest_wins = max(longest_wins, wins)
        elif trade.pnl < 0:
            losses += 1
            wins = 0
            longest_losses = max(longest_losses, losses)

    current = 0
    if ordered:
        last = ordered[-1]
        if last.pnl > 0:
            current = wins
        elif last.pnl < 0:
            current = -losses
    return Streaks(
        current_streak=current,
        longest_win_streak=longest_wins,
        longest_loss_streak=longest_losses,
    )


def trades_by_date(trades: Sequence[Trade], day: date) -> List[Trade]:
    return [trade for trade in trades if trade.date == day]


def trade_summary(trades: Sequence[Trade]) -> TradeSummary:
    """Winner/loser counts and averages as shown on the dashboard cards.

    Scratch trades count as losers here.
    """

    winners = [trade.pnl for trade in trades if trade.pnl > 0]
    losers = [trade.pnl for trade in trades if trade.pnl <= 0]
    return TradeSummary(
        total_trades=len(trades),
        winners=len(winners),
        losers=len(losers),
        average_winner=sum(winners) / len(winners) if winners else 0.0,
        average_loser=abs(sum(losers) / len(losers)) if losers else 0.0,
    )


def dashboard_summary(trades: Sequence[Trade]) -> DashboardSummary:
    return DashboardSummary(
        total_pnl=total_pnl(trades),
        win_rate=win_rate(trades),
        profit_factor=profit_factor(trades),
        max_drawdown=max_drawdown(trades),
        average_rr=average_rr(trades),
        summary=trade_summary(trades),
        streaks=streaks(trades),
        best_worst=best_worst_trades(trades),
        daily_pnl=daily_pnl(trades),
        performance_by_symbol=performance_by_symbol(trades),
    )

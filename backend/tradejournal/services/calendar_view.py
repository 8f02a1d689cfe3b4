from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import List, Sequence

from tradejournal.services.analytics import net_pnl, total_pnl, trades_by_date
from tradejournal.services.records import Trade


@dataclass(frozen=True)
class DaySummary:
    date: date
    trades: List[Trade]
    pnl: float
    labels: List[str]


@dataclass(frozen=True)
class WeekSummary:
    days: List[int]
    pnl: float
    trades: int


@dataclass(frozen=True)
class CalendarMonth:
    year: int
    month: int
    pnl: float
    days: List[DaySummary] = field(default_factory=list)
    weeks: List[WeekSummary] = field(default_factory=list)


def day_summary(trades: Sequence[Trade], day: date) -> DaySummary:
    """Trades of ``day`` with their net P&L and the distinct tags and setups used."""

    day_trades = trades_by_date(trades, day)
    labels: List[str] = []
    for label in [tag for trade in day_trades for tag in trade.tags] + [
        trade.setup for trade in day_trades if trade.setup
    ]:
        if label not in labels:
            labels.append(label)
    return DaySummary(date=day, trades=day_trades, pnl=total_pnl(day_trades), labels=labels)


def calendar_month(trades: Sequence[Trade], year: int, month: int) -> CalendarMonth:
    """Per-day and per-week net P&L for a month laid out Sunday first.

    Days without trades are omitted from ``days``; week rows keep 0 for the
    padding days that belong to the neighbouring months.
    """

    month_trades = [trade for trade in trades if trade.date.year == year and trade.date.month == month]
    summaries = {}
    for trade in month_trades:
        if trade.date not in summaries:
            summaries[trade.date] = day_summary(month_trades, trade.date)

    weeks: List[WeekSummary] = []
    for week in calendar.Calendar(firstweekday=calendar.SUNDAY).monthdayscalendar(year, month):
        week_days = [summaries[date(year, month, day)] for day in week if day and date(year, month, day) in summaries]
        weeks.append(
            WeekSummary(
                days=week,
                pnl=sum(summary.pnl for summary in week_days),
                trades=sum(len(summary.trades) for summary in week_days),
            )
        )

    return CalendarMonth(
        year=year,
        month=month,
        pnl=sum(net_pnl(trade) for trade in month_trades),
        days=[summaries[day] for day in sorted(summaries)],
        weeks=weeks,
    )

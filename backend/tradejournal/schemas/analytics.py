from __future__ import annotations

import math
from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from tradejournal.schemas.trades import TradeResponse


class DailyPnLPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date_type
    pnl: float
    cumulative: float


class TagPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tag: str
    pnl: float
    count: int
    win_rate: float


class SymbolPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    pnl: float
    count: int
    win_rate: float


class BestWorstResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    best: Optional[TradeResponse] = None
    worst: Optional[TradeResponse] = None


class StreaksResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_streak: int
    longest_win_streak: int
    longest_loss_streak: int


class TradeSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_trades: int
    winners: int
    losers: int
    average_winner: float
    average_loser: float


class DrawdownResponse(BaseModel):
    max_drawdown: float


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_pnl: float
    win_rate: float
    profit_factor: float
    max_drawdown: float
    average_rr: float
    summary: TradeSummaryResponse
    streaks: StreaksResponse
    best_worst: BestWorstResponse
    daily_pnl: List[DailyPnLPoint]
    performance_by_symbol: List[SymbolPerformanceResponse]

    @field_serializer("profit_factor", when_used="json")
    def serialize_profit_factor(self, value: float) -> float | str:
        # JSON has no infinity literal.
        if math.isinf(value):
            return "Infinity"
        return value


class DaySummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date_type
    trades: List[TradeResponse]
    pnl: float
    labels: List[str]


class WeekSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days: List[int]
    pnl: float
    trades: int


class CalendarMonthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    pnl: float
    days: List[DaySummaryResponse]
    weeks: List[WeekSummaryResponse]

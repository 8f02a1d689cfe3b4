from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path

from tradejournal.api import deps
from tradejournal.schemas.analytics import (
    BestWorstResponse,
    CalendarMonthResponse,
    DailyPnLPoint,
    DashboardResponse,
    DaySummaryResponse,
    DrawdownResponse,
    StreaksResponse,
    SymbolPerformanceResponse,
    TagPerformanceResponse,
)
from tradejournal.services import analytics
from tradejournal.services.calendar_view import calendar_month, day_summary
from tradejournal.services.trade_store import TradeStore

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=DashboardResponse)
def get_summary(store: TradeStore = Depends(deps.get_store)) -> DashboardResponse:
    return DashboardResponse.model_validate(analytics.dashboard_summary(store.trades()))


@router.get("/daily", response_model=list[DailyPnLPoint])
def get_daily_pnl(store: TradeStore = Depends(deps.get_store)):
    return analytics.daily_pnl(store.trades())


@router.get("/drawdown", response_model=DrawdownResponse)
def get_max_drawdown(store: TradeStore = Depends(deps.get_store)) -> DrawdownResponse:
    return DrawdownResponse(max_drawdown=analytics.max_drawdown(store.trades()))


@router.get("/by-tag", response_model=list[TagPerformanceResponse])
def get_performance_by_tag(store: TradeStore = Depends(deps.get_store)):
    return analytics.performance_by_tag(store.trades())


@router.get("/by-symbol", response_model=list[SymbolPerformanceResponse])
def get_performance_by_symbol(store: TradeStore = Depends(deps.get_store)):
    return analytics.performance_by_symbol(store.trades())


@router.get("/best-worst", response_model=BestWorstResponse)
def get_best_worst(store: TradeStore = Depends(deps.get_store)) -> BestWorstResponse:
    return BestWorstResponse.model_validate(analytics.best_worst_trades(store.trades()))


@router.get("/streaks", response_model=StreaksResponse)
def get_streaks(store: TradeStore = Depends(deps.get_store)) -> StreaksResponse:
    return StreaksResponse.model_validate(analytics.streaks(store.trades()))


@router.get("/calendar/{year}/{month}", response_model=CalendarMonthResponse)
def get_calendar_month(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    store: TradeStore = Depends(deps.get_store),
) -> CalendarMonthResponse:
    return CalendarMonthResponse.model_validate(calendar_month(store.trades(), year, month))


@router.get("/day/{day}", response_model=DaySummaryResponse)
def get_day(day: date, store: TradeStore = Depends(deps.get_store)) -> DaySummaryResponse:
    return DaySummaryResponse.model_validate(day_summary(store.trades(), day))

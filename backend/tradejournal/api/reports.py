from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from tradejournal.api import deps
from tradejournal.schemas.reports import (
    PnLMode,
    ReportCategoryResponse,
    ReportResponse,
    ReportRowResponse,
    SummaryResponse,
    SummaryRowResponse,
)
from tradejournal.services.reports import REPORT_CATEGORIES, ReportCategory, aggregate, summarize
from tradejournal.services.trade_store import TradeStore

router = APIRouter(prefix="/reports", tags=["reports"])


def _get_category(category_id: str) -> ReportCategory:
    category = REPORT_CATEGORIES.get(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Unknown report category: {category_id}")
    return category


@router.get("/categories", response_model=list[ReportCategoryResponse])
def list_categories() -> list[ReportCategoryResponse]:
    return [
        ReportCategoryResponse(id=category.id, label=category.label, title=category.title)
        for category in REPORT_CATEGORIES.values()
    ]


@router.get("/{category_id}", response_model=ReportResponse)
def get_report(
    category_id: str,
    pnl_mode: PnLMode = Query("net"),
    store: TradeStore = Depends(deps.get_store),
) -> ReportResponse:
    category = _get_category(category_id)
    rows = aggregate(store.trades(), category.key_fn, pnl_mode)
    return ReportResponse(
        category=category.id,
        title=category.title,
        pnl_mode=pnl_mode,
        rows=[ReportRowResponse.model_validate(row) for row in rows],
    )


@router.get("/{category_id}/summary", response_model=SummaryResponse)
def get_report_summary(
    category_id: str,
    pnl_mode: PnLMode = Query("net"),
    store: TradeStore = Depends(deps.get_store),
) -> SummaryResponse:
    category = _get_category(category_id)
    rows = summarize(store.trades(), category.key_fn, pnl_mode)
    return SummaryResponse(
        category=category.id,
        title=category.title,
        pnl_mode=pnl_mode,
        rows=[SummaryRowResponse.model_validate(row) for row in rows],
    )

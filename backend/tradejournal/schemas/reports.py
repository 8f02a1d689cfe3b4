from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict

PnLMode = Literal["net", "gross"]


class ReportCategoryResponse(BaseModel):
    id: str
    label: str
    title: str


class ReportRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    trades: int
    pnl: float


class SummaryRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    net_profit: float
    win_rate: float
    total_profits: float
    total_loss: float
    trades: int
    volume: float


class ReportResponse(BaseModel):
    category: str
    title: str
    pnl_mode: PnLMode
    rows: List[ReportRowResponse]


class SummaryResponse(BaseModel):
    category: str
    title: str
    pnl_mode: PnLMode
    rows: List[SummaryRowResponse]


class TagPayload(BaseModel):
    tag: str

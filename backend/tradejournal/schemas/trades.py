from __future__ import annotations

from datetime import date as date_type, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from tradejournal.services.records import TradeInput

_NULLABLE_FIELDS = {"setup", "notes", "entry_time"}


class TradeBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date_type = Field(..., description="Day the trade is attributed to")
    symbol: str
    side: Literal["long", "short"] = "long"
    entry_price: float = Field(0.0, ge=0)
    exit_price: float = Field(0.0, ge=0)
    quantity: float = Field(1.0, ge=0)
    pnl: float = 0.0
    commission: float = Field(0.0, ge=0)
    duration: int = Field(0, ge=0, description="Minutes held")
    setup: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    mistakes: List[str] = Field(default_factory=list)
    entry_time: Optional[datetime] = None


class TradeCreate(TradeBase):
    def to_input(self) -> TradeInput:
        return TradeInput(**self.model_dump())


class TradeUpdate(BaseModel):
    date: date_type | None = None
    symbol: str | None = None
    side: Literal["long", "short"] | None = None
    entry_price: float | None = Field(None, ge=0)
    exit_price: float | None = Field(None, ge=0)
    quantity: float | None = Field(None, ge=0)
    pnl: float | None = None
    commission: float | None = Field(None, ge=0)
    duration: int | None = Field(None, ge=0)
    setup: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    mistakes: Optional[List[str]] = None
    entry_time: Optional[datetime] = None

    def to_patch(self) -> dict[str, object]:
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None or key in _NULLABLE_FIELDS}


class TradeResponse(TradeBase):
    id: str


class TradeDeleteResponse(BaseModel):
    status: str

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from tradejournal.api import deps
from tradejournal.core.config import settings
from tradejournal.schemas.imports import BrokerFormatResponse, ImportResponse
from tradejournal.schemas.trades import (
    TradeCreate,
    TradeDeleteResponse,
    TradeResponse,
    TradeUpdate,
)
from tradejournal.services import analytics
from tradejournal.services.csv_normalizer import BROKER_FORMATS, import_csv
from tradejournal.services.records import Trade
from tradejournal.services.trade_store import PersistenceError, TradeNotFound, TradeStore

router = APIRouter(prefix="/trades", tags=["trades"])


@router.get("/", response_model=list[TradeResponse])
def list_trades(
    trade_date: date | None = Query(None, alias="date"),
    symbol: str | None = Query(None),
    store: TradeStore = Depends(deps.get_store),
) -> list[Trade]:
    trades = store.trades()
    if trade_date is not None:
        trades = analytics.trades_by_date(trades, trade_date)
    if symbol is not None:
        trades = [trade for trade in trades if trade.symbol == symbol.strip().upper()]
    return list(trades)


@router.post("/", response_model=TradeResponse, status_code=201)
def create_trade(payload: TradeCreate, store: TradeStore = Depends(deps.get_store)) -> Trade:
    try:
        return store.add(payload.to_input())
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc


@router.post("/bulk", response_model=list[TradeResponse], status_code=201)
def create_trades(payload: list[TradeCreate], store: TradeStore = Depends(deps.get_store)) -> list[Trade]:
    try:
        return store.add_many(item.to_input() for item in payload)
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc


@router.get("/formats", response_model=list[BrokerFormatResponse])
def list_broker_formats() -> list[BrokerFormatResponse]:
    return [BrokerFormatResponse(id=format_id, **info) for format_id, info in BROKER_FORMATS.items()]


@router.post("/import", response_model=ImportResponse)
def import_trades(
    file: UploadFile = File(...),
    broker_format: str = Query(settings.default_broker_format),
    store: TradeStore = Depends(deps.get_store),
) -> ImportResponse:
    filename = (file.filename or "").lower()
    if not filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Expected a CSV file")
    if broker_format not in BROKER_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unknown broker format: {broker_format}")

    try:
        content = file.file.read().decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded") from exc

    try:
        result = import_csv(store, content, broker_format)
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc
    return ImportResponse.model_validate(result)


@router.patch("/{trade_id}", response_model=Optional[TradeResponse])
def update_trade(
    trade_id: str,
    payload: TradeUpdate,
    store: TradeStore = Depends(deps.get_store),
) -> Optional[Trade]:
    """Unknown ids yield ``null`` unless the store is strict."""

    try:
        trade = store.update(trade_id, payload.to_patch())
    except TradeNotFound as exc:
        raise HTTPException(status_code=404, detail="Trade not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc

    return trade


@router.delete("/{trade_id}", response_model=TradeDeleteResponse)
def delete_trade(trade_id: str, store: TradeStore = Depends(deps.get_store)) -> TradeDeleteResponse:
    try:
        store.remove(trade_id)
    except TradeNotFound as exc:
        raise HTTPException(status_code=404, detail="Trade not found") from exc
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc
    return TradeDeleteResponse(status="ok")


@router.delete("/", response_model=TradeDeleteResponse)
def clear_trades(store: TradeStore = Depends(deps.get_store)) -> TradeDeleteResponse:
    try:
        store.clear()
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc
    return TradeDeleteResponse(status="ok")

from __future__ import annotations

from fastapi import APIRouter, Depends

from tradejournal.api import deps
from tradejournal.schemas.reports import TagPayload
from tradejournal.services.trade_store import TradeStore

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[str])
def list_tags(store: TradeStore = Depends(deps.get_store)) -> list[str]:
    return list(store.custom_tags())


@router.post("/", response_model=list[str])
def add_tag(payload: TagPayload, store: TradeStore = Depends(deps.get_store)) -> list[str]:
    return list(store.add_custom_tag(payload.tag))


@router.delete("/{tag}", response_model=list[str])
def remove_tag(tag: str, store: TradeStore = Depends(deps.get_store)) -> list[str]:
    return list(store.remove_custom_tag(tag))

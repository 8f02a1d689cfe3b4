from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from tradejournal.api import deps
from tradejournal.schemas.journal import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalEntryUpdate,
)
from tradejournal.services.records import JournalEntry
from tradejournal.services.trade_store import JournalEntryNotFound, PersistenceError, TradeStore

router = APIRouter(prefix="/journal", tags=["journal"])


@router.get("/", response_model=list[JournalEntryResponse])
def list_entries(store: TradeStore = Depends(deps.get_store)) -> list[JournalEntry]:
    return sorted(store.journal_entries(), key=lambda entry: entry.date, reverse=True)


@router.post("/", response_model=JournalEntryResponse, status_code=201)
def create_entry(payload: JournalEntryCreate, store: TradeStore = Depends(deps.get_store)) -> JournalEntry:
    try:
        return store.add_journal_entry(payload.to_input())
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc


@router.patch("/{entry_id}", response_model=Optional[JournalEntryResponse])
def update_entry(
    entry_id: str,
    payload: JournalEntryUpdate,
    store: TradeStore = Depends(deps.get_store),
) -> Optional[JournalEntry]:
    try:
        entry = store.update_journal_entry(entry_id, payload.to_patch())
    except JournalEntryNotFound as exc:
        raise HTTPException(status_code=404, detail="Journal entry not found") from exc
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc
    return entry


@router.delete("/{entry_id}")
def delete_entry(entry_id: str, store: TradeStore = Depends(deps.get_store)) -> dict[str, str]:
    try:
        store.remove_journal_entry(entry_id)
    except JournalEntryNotFound as exc:
        raise HTTPException(status_code=404, detail="Journal entry not found") from exc
    except PersistenceError as exc:
        raise deps.persistence_error(exc) from exc
    return {"status": "ok"}

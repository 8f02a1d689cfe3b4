from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from tradejournal.core.config import settings
from tradejournal.db.session import SessionLocal
from tradejournal.services.repository import SqlTradeRepository
from tradejournal.services.trade_store import PersistenceError, StoreRegistry, TradeStore

logger = logging.getLogger(__name__)


def create_store(user_id: str) -> TradeStore:
    if not settings.persistence_enabled:
        return TradeStore(strict=settings.strict_store)
    store = TradeStore(SqlTradeRepository(SessionLocal, user_id), strict=settings.strict_store)
    store.load()
    return store


@lru_cache()
def get_registry() -> StoreRegistry:
    return StoreRegistry(create_store)


def get_user_id(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str:
    user_id = (x_user_id or "").strip()
    return user_id or settings.default_user_id


def get_store(
    user_id: str = Depends(get_user_id),
    registry: StoreRegistry = Depends(get_registry),
) -> TradeStore:
    try:
        return registry.get(user_id)
    except PersistenceError as exc:
        raise persistence_error(exc) from exc


def persistence_error(exc: PersistenceError) -> HTTPException:
    logger.error("Persistence failure: %s", exc.message)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)


__all__ = ["get_registry", "get_store", "get_user_id", "persistence_error"]

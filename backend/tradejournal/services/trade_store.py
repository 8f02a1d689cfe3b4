from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import uuid4

from tradejournal.services.adapters import (
    journal_entry_to_row,
    journal_fields_to_row,
    row_to_journal_entry,
    row_to_trade,
    trade_fields_to_row,
    trade_to_row,
)
from tradejournal.services.records import JournalEntry, JournalEntryInput, Trade, TradeInput
from tradejournal.services.repository import ServiceResult, TradeRepository

logger = logging.getLogger(__name__)

DEFAULT_TAGS = (
    "FOMO",
    "REVENGE",
    "OVERSIZE",
    "PATIENCE",
    "BREAKOUT",
    "TREND",
    "REVERSAL",
    "NEWS",
)


class StoreClosedError(RuntimeError):
    pass


class PersistenceError(RuntimeError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TradeNotFound(LookupError):
    pass


class JournalEntryNotFound(LookupError):
    pass


def _new_id() -> str:
    return uuid4().hex


class TradeStore:
    """Canonical, ordered set of a user's trades and journal entries.

    Reads return immutable snapshots; writes are serialized per instance. When
    a repository is attached, a mutation is applied locally only after the
    repository confirmed it, so a failed write leaves the store untouched.
    Unknown ids on update/remove are ignored unless ``strict`` is set.
    """

    def __init__(self, repository: TradeRepository | None = None, *, strict: bool = False) -> None:
        self._repository = repository
        self.strict = strict
        self._lock = threading.RLock()
        self._trades: List[Trade] = []
        self._journal: List[JournalEntry] = []
        self._custom_tags: List[str] = list(DEFAULT_TAGS)
        self._closed = False

    # Lifecycle

    def __enter__(self) -> "TradeStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def persistent(self) -> bool:
        return self._repository is not None

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._trades = []
            self._journal = []

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Trade store used after close()")

    def load(self) -> Tuple[Trade, ...]:
        """Replace local state with the repository contents."""

        with self._lock:
            self._ensure_open()
            if self._repository is None:
                return tuple(self._trades)
            trades_res = self._repository.fetch_trades()
            _raise_on_error(trades_res, "load trades")
            journal_res = self._repository.fetch_journal_entries()
            _raise_on_error(journal_res, "load journal entries")
            self._trades = [row_to_trade(row) for row in trades_res.data or []]
            self._journal = [row_to_journal_entry(row) for row in journal_res.data or []]
            logger.info(
                "Loaded %d trades and %d journal entries for user %s",
                len(self._trades),
                len(self._journal),
                self._repository.user_id,
            )
            return tuple(self._trades)

    # Trades

    def trades(self) -> Tuple[Trade, ...]:
        with self._lock:
            self._ensure_open()
            return tuple(self._trades)

    def get(self, trade_id: str) -> Optional[Trade]:
        with self._lock:
            self._ensure_open()
            index = _find(self._trades, trade_id)
            return None if index is None else self._trades[index]

    def add(self, trade: TradeInput) -> Trade:
        return self.add_many([trade])[0]

    def add_many(self, trades: Iterable[TradeInput]) -> List[Trade]:
        inputs = list(trades)
        with self._lock:
            self._ensure_open()
            if not inputs:
                return []
            if self._repository is None:
                created = [Trade.from_input(_new_id(), item) for item in inputs]
            else:
                result = self._repository.create_trades([trade_to_row(item) for item in inputs])
                _raise_on_error(result, "create trades")
                created = [row_to_trade(row) for row in result.data or []]
            self._trades.extend(created)
            logger.debug("Added %d trades", len(created))
            return created

    def update(self, trade_id: str, patch: Mapping[str, Any]) -> Optional[Trade]:
        with self._lock:
            self._ensure_open()
            index = _find(self._trades, trade_id)
            if index is None:
                if self.strict:
                    raise TradeNotFound(trade_id)
                logger.debug("Ignoring update of unknown trade %s", trade_id)
                return None
            updated = self._trades[index].with_changes(patch)
            if self._repository is not None:
                result = self._repository.update_trade(trade_id, trade_fields_to_row(updated, patch.keys()))
                _raise_on_error(result, "update trade")
                updated = row_to_trade(result.data)
            self._trades[index] = updated
            return updated

    def remove(self, trade_id: str) -> bool:
        with self._lock:
            self._ensure_open()
            index = _find(self._trades, trade_id)
            if index is None:
                if self.strict:
                    raise TradeNotFound(trade_id)
                logger.debug("Ignoring removal of unknown trade %s", trade_id)
                return False
            if self._repository is not None:
                _raise_on_error(self._repository.delete_trade(trade_id), "delete trade")
            del self._trades[index]
            return True

    def clear(self) -> None:
        with self._lock:
            self._ensure_open()
            if self._repository is not None:
                result = self._repository.delete_all_trades(self._repository.user_id)
                _raise_on_error(result, "delete all trades")
            self._trades = []

    # Journal entries

    def journal_entries(self) -> Tuple[JournalEntry, ...]:
        with self._lock:
            self._ensure_open()
            return tuple(self._journal)

    def add_journal_entry(self, entry: JournalEntryInput) -> JournalEntry:
        with self._lock:
            self._ensure_open()
            if self._repository is None:
                created = JournalEntry.from_input(_new_id(), entry)
            else:
                result = self._repository.create_journal_entry(journal_entry_to_row(entry))
                _raise_on_error(result, "create journal entry")
                created = row_to_journal_entry(result.data)
            self._journal.append(created)
            return created

    def update_journal_entry(self, entry_id: str, patch: Mapping[str, Any]) -> Optional[JournalEntry]:
        with self._lock:
            self._ensure_open()
            index = _find(self._journal, entry_id)
            if index is None:
                if self.strict:
                    raise JournalEntryNotFound(entry_id)
                return None
            updated = self._journal[index].with_changes(patch)
            if self._repository is not None:
                result = self._repository.update_journal_entry(
                    entry_id, journal_fields_to_row(updated, patch.keys())
                )
                _raise_on_error(result, "update journal entry")
                updated = row_to_journal_entry(result.data)
            self._journal[index] = updated
            return updated

    def remove_journal_entry(self, entry_id: str) -> bool:
        with self._lock:
            self._ensure_open()
            index = _find(self._journal, entry_id)
            if index is None:
                if self.strict:
                    raise JournalEntryNotFound(entry_id)
                return False
            if self._repository is not None:
                _raise_on_error(self._repository.delete_journal_entry(entry_id), "delete journal entry")
            del self._journal[index]
            return True

    # Custom tags

    def custom_tags(self) -> Tuple[str, ...]:
        with self._lock:
            self._ensure_open()
            return tuple(self._custom_tags)

    def add_custom_tag(self, tag: str) -> Tuple[str, ...]:
        label = (tag or "").strip().upper()
        with self._lock:
            self._ensure_open()
            if label and label not in self._custom_tags:
                self._custom_tags.append(label)
            return tuple(self._custom_tags)

    def remove_custom_tag(self, tag: str) -> Tuple[str, ...]:
        label = (tag or "").strip().upper()
        with self._lock:
            self._ensure_open()
            self._custom_tags = [existing for existing in self._custom_tags if existing != label]
            return tuple(self._custom_tags)


class StoreRegistry:
    """One ``TradeStore`` per user, created lazily by ``factory``."""

    def __init__(self, factory: Callable[[str], TradeStore]) -> None:
        self._factory = factory
        self._stores: Dict[str, TradeStore] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> TradeStore:
        with self._lock:
            store = self._stores.get(user_id)
            if store is None or store.closed:
                store = self._factory(user_id)
                self._stores[user_id] = store
            return store

    def close_all(self) -> None:
        with self._lock:
            for store in self._stores.values():
                store.close()
            self._stores.clear()


def _find(items: List[Any], item_id: str) -> Optional[int]:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None


def _raise_on_error(result: ServiceResult[Any], action: str) -> None:
    if result.error is not None:
        logger.error("Persistence failed to %s: %s", action, result.error)
        raise PersistenceError(result.error)


__all__ = [
    "DEFAULT_TAGS",
    "JournalEntryNotFound",
    "PersistenceError",
    "StoreClosedError",
    "StoreRegistry",
    "TradeNotFound",
    "TradeStore",
]

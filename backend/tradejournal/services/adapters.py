"""Translation between persistence rows and journal records.

Rows written by different versions of the storage schema do not agree on
column names (``symbol`` vs ``instrument``, ``quantity`` vs ``size``...). All
of that drift is absorbed here so the analytics never see a raw row.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from tradejournal.services.records import (
    JournalEntry,
    JournalEntryInput,
    Trade,
    TradeInput,
)
from tradejournal.utils.time import coerce_date

# Record field -> accepted row keys, first present key wins.
TRADE_ROW_ALIASES: Dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "date": ("trade_date", "date"),
    "symbol": ("symbol", "instrument"),
    "side": ("side", "direction"),
    "entry_price": ("entry_price", "entryPrice"),
    "exit_price": ("exit_price", "exitPrice"),
    "quantity": ("quantity", "size"),
    "pnl": ("pnl",),
    "commission": ("commission",),
    "setup": ("setup",),
    "notes": ("notes",),
    "tags": ("tags",),
    "mistakes": ("mistakes",),
    "entry_time": ("entry_time",),
}

JOURNAL_ROW_ALIASES: Dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "date": ("trade_date", "date"),
    "notes": ("notes", "content"),
    "mood": ("mood",),
    "lessons": ("lessons",),
}

# Record field -> column written by the current schema.
TRADE_COLUMNS: Dict[str, str] = {
    "date": "trade_date",
    "symbol": "symbol",
    "side": "side",
    "entry_price": "entry_price",
    "exit_price": "exit_price",
    "quantity": "quantity",
    "pnl": "pnl",
    "commission": "commission",
    "duration": "duration",
    "setup": "setup",
    "notes": "notes",
    "tags": "tags",
    "mistakes": "mistakes",
    "entry_time": "entry_time",
}

JOURNAL_COLUMNS: Dict[str, str] = {
    "date": "trade_date",
    "notes": "notes",
    "mood": "mood",
    "lessons": "lessons",
}


def _pick(row: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _duration_minutes(row: Mapping[str, Any]) -> int:
    minutes = row.get("duration")
    if minutes is not None:
        return int(minutes)
    seconds = row.get("duration_seconds")
    if seconds:
        return int(seconds) // 60
    return 0


def row_to_trade(row: Mapping[str, Any]) -> Trade:
    values = {field: _pick(row, keys) for field, keys in TRADE_ROW_ALIASES.items()}
    entry_price = values["entry_price"] or 0.0
    exit_price = values["exit_price"]
    return Trade(
        id=str(values["id"]),
        date=coerce_date(values["date"]),
        symbol=values["symbol"] or "",
        side=values["side"] or "long",
        entry_price=entry_price,
        exit_price=entry_price if exit_price is None else exit_price,
        quantity=values["quantity"] if values["quantity"] is not None else 0.0,
        pnl=values["pnl"] or 0.0,
        commission=values["commission"] or 0.0,
        duration=_duration_minutes(row),
        setup=values["setup"],
        notes=values["notes"],
        tags=tuple(values["tags"] or ()),
        mistakes=tuple(values["mistakes"] or ()),
        entry_time=values["entry_time"],
    )


def trade_to_row(trade: TradeInput) -> Dict[str, Any]:
    return trade_fields_to_row(trade, TRADE_COLUMNS)


def trade_fields_to_row(trade: TradeInput, field_names: Iterable[str]) -> Dict[str, Any]:
    """Map selected record fields to their storage columns."""

    row: Dict[str, Any] = {}
    for name in field_names:
        value = getattr(trade, name)
        if name in ("tags", "mistakes"):
            value = list(value)
        row[TRADE_COLUMNS[name]] = value
    return row


def row_to_journal_entry(row: Mapping[str, Any]) -> JournalEntry:
    values = {field: _pick(row, keys) for field, keys in JOURNAL_ROW_ALIASES.items()}
    return JournalEntry(
        id=str(values["id"]),
        date=coerce_date(values["date"]),
        notes=values["notes"] or "",
        mood=values["mood"],
        lessons=values["lessons"],
    )


def journal_entry_to_row(entry: JournalEntryInput) -> Dict[str, Any]:
    return journal_fields_to_row(entry, JOURNAL_COLUMNS)


def journal_fields_to_row(entry: JournalEntryInput, field_names: Iterable[str]) -> Dict[str, Any]:
    return {JOURNAL_COLUMNS[name]: getattr(entry, name) for name in field_names}


__all__ = [
    "journal_entry_to_row",
    "journal_fields_to_row",
    "row_to_journal_entry",
    "row_to_trade",
    "trade_fields_to_row",
    "trade_to_row",
]

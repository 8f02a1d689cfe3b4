from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Tuple

SIDES = ("long", "short")
MOODS = ("positive", "neutral", "negative")


def normalize_labels(values: Iterable[str] | None) -> Tuple[str, ...]:
    """Uppercase, trim and de-duplicate labels while keeping their order."""

    if not values:
        return ()
    labels: list[str] = []
    for value in values:
        label = (value or "").strip().upper()
        if label and label not in labels:
            labels.append(label)
    return tuple(labels)


def _clean_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def _as_float(value: Any, field_name: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{field_name} must be a finite number")
    return number


@dataclass(frozen=True)
class TradeInput:
    date: date
    symbol: str
    side: str = "long"
    entry_price: float = 0.0
    exit_price: float = 0.0
    quantity: float = 1.0
    pnl: float = 0.0
    commission: float = 0.0
    duration: int = 0
    setup: Optional[str] = None
    notes: Optional[str] = None
    tags: Tuple[str, ...] = ()
    mistakes: Tuple[str, ...] = ()
    entry_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        side = (self.side or "").strip().lower()
        if side not in SIDES:
            raise ValueError(f"Unknown side {self.side!r}")
        set_ = object.__setattr__
        set_(self, "side", side)
        set_(self, "symbol", (self.symbol or "").strip().upper())
        set_(self, "entry_price", _as_float(self.entry_price, "entry_price"))
        set_(self, "exit_price", _as_float(self.exit_price, "exit_price"))
        set_(self, "quantity", abs(_as_float(self.quantity, "quantity")))
        set_(self, "pnl", _as_float(self.pnl, "pnl"))
        set_(self, "commission", abs(_as_float(self.commission, "commission")))
        set_(self, "duration", max(0, int(self.duration or 0)))
        set_(self, "setup", _clean_optional_text(self.setup))
        set_(self, "notes", _clean_optional_text(self.notes))
        set_(self, "tags", normalize_labels(self.tags))
        set_(self, "mistakes", normalize_labels(self.mistakes))

    @property
    def net_pnl(self) -> float:
        return self.pnl - self.commission


TRADE_FIELDS = tuple(f.name for f in fields(TradeInput))


@dataclass(frozen=True, kw_only=True)
class Trade(TradeInput):
    id: str

    @classmethod
    def from_input(cls, trade_id: str, data: TradeInput) -> "Trade":
        return cls(id=trade_id, **{name: getattr(data, name) for name in TRADE_FIELDS})

    def with_changes(self, patch: Mapping[str, Any]) -> "Trade":
        """Return a copy with ``patch`` applied; normalization runs again."""

        _check_patch(patch, TRADE_FIELDS)
        return replace(self, **patch)


@dataclass(frozen=True)
class JournalEntryInput:
    date: date
    notes: str = ""
    mood: Optional[str] = None
    lessons: Optional[str] = None

    def __post_init__(self) -> None:
        mood = _clean_optional_text(self.mood)
        if mood is not None:
            mood = mood.lower()
            if mood not in MOODS:
                raise ValueError(f"Unknown mood {self.mood!r}")
        object.__setattr__(self, "mood", mood)
        object.__setattr__(self, "notes", self.notes or "")
        object.__setattr__(self, "lessons", _clean_optional_text(self.lessons))


JOURNAL_FIELDS = tuple(f.name for f in fields(JournalEntryInput))


@dataclass(frozen=True, kw_only=True)
class JournalEntry(JournalEntryInput):
    id: str

    @classmethod
    def from_input(cls, entry_id: str, data: JournalEntryInput) -> "JournalEntry":
        return cls(id=entry_id, **{name: getattr(data, name) for name in JOURNAL_FIELDS})

    def with_changes(self, patch: Mapping[str, Any]) -> "JournalEntry":
        _check_patch(patch, JOURNAL_FIELDS)
        return replace(self, **patch)


def _check_patch(patch: Mapping[str, Any], allowed: Tuple[str, ...]) -> None:
    unknown = sorted(set(patch) - set(allowed))
    if unknown:
        raise ValueError("Unknown fields in patch: " + ", ".join(unknown))


__all__ = [
    "JOURNAL_FIELDS",
    "JournalEntry",
    "JournalEntryInput",
    "MOODS",
    "SIDES",
    "TRADE_FIELDS",
    "Trade",
    "TradeInput",
    "normalize_labels",
]

from __future__ import annotations

# Import every model so Base.metadata knows all tables.
from tradejournal.models.base import Base  # noqa: F401
from tradejournal.models.journal_entries import JournalEntryRecord  # noqa: F401
from tradejournal.models.trades import TradeRecord  # noqa: F401

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tradejournal.models.base import Base
from tradejournal.models.trades import TradeRecord
from tradejournal.services.records import JournalEntryInput, TradeInput
from tradejournal.services.repository import SqlTradeRepository
from tradejournal.services.trade_store import PersistenceError, TradeStore


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    try:
        yield TestingSessionLocal
    finally:
        engine.dispose()


def test_store_writes_through_to_database(session_factory):
    store = TradeStore(SqlTradeRepository(session_factory, "alice"))

    trade = store.add(TradeInput(date=date(2024, 1, 2), symbol="EURUSD", pnl=100, commission=5, tags=["trend"]))
    store.update(trade.id, {"pnl": 120.0})

    db = session_factory()
    try:
        record = db.get(TradeRecord, trade.id)
        assert record.user_id == "alice"
        assert record.pnl == 120.0
        assert record.tags == ["TREND"]
    finally:
        db.close()


def test_reload_restores_trades_newest_first(session_factory):
    repo = SqlTradeRepository(session_factory, "alice")
    store = TradeStore(repo)
    store.add_many(
        [
            TradeInput(date=date(2024, 1, 2), symbol="EURUSD", pnl=10),
            TradeInput(date=date(2024, 1, 5), symbol="AAPL", pnl=-3),
        ]
    )
    store.add_journal_entry(JournalEntryInput(date=date(2024, 1, 5), notes="Chased the open"))

    reloaded = TradeStore(SqlTradeRepository(session_factory, "alice"))
    trades = reloaded.load()

    assert [trade.symbol for trade in trades] == ["AAPL", "EURUSD"]
    assert reloaded.journal_entries()[0].notes == "Chased the open"


def test_users_are_isolated(session_factory):
    alice = TradeStore(SqlTradeRepository(session_factory, "alice"))
    bob = TradeStore(SqlTradeRepository(session_factory, "bob"))
    trade = alice.add(TradeInput(date=date(2024, 1, 2), symbol="EURUSD"))
    bob.add(TradeInput(date=date(2024, 1, 2), symbol="AAPL"))

    bob.clear()

    assert [t.symbol for t in TradeStore(SqlTradeRepository(session_factory, "alice")).load()] == ["EURUSD"]
    assert TradeStore(SqlTradeRepository(session_factory, "bob")).load() == ()

    result = SqlTradeRepository(session_factory, "bob").update_trade(trade.id, {"pnl": 1.0})
    assert result.error == f"Trade {trade.id} not found"


def test_remove_and_journal_updates(session_factory):
    store = TradeStore(SqlTradeRepository(session_factory, "alice"))
    trade = store.add(TradeInput(date=date(2024, 1, 2), symbol="EURUSD"))
    entry = store.add_journal_entry(JournalEntryInput(date=date(2024, 1, 2), notes="ok"))

    store.update_journal_entry(entry.id, {"mood": "negative"})
    assert store.remove(trade.id) is True

    reloaded = TradeStore(SqlTradeRepository(session_factory, "alice"))
    assert reloaded.load() == ()
    assert reloaded.journal_entries()[0].mood == "negative"


def test_database_errors_surface_as_persistence_errors(session_factory):
    store = TradeStore(SqlTradeRepository(session_factory, "alice"))
    db = session_factory()
    try:
        Base.metadata.drop_all(db.get_bind())
    finally:
        db.close()

    with pytest.raises(PersistenceError):
        store.add(TradeInput(date=date(2024, 1, 2), symbol="EURUSD"))
    assert store.trades() == ()

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tradejournal.models.journal_entries import JournalEntryRecord
from tradejournal.models.trades import TradeRecord
from tradejournal.utils.time import utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")
Row = Dict[str, Any]


@dataclass
class ServiceResult(Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TradeRepository(Protocol):
    """CRUD collaborator the trade store persists through."""

    user_id: str

    def fetch_trades(self) -> ServiceResult[List[Row]]: ...

    def create_trade(self, row: Mapping[str, Any]) -> ServiceResult[Row]: ...

    def create_trades(self, rows: List[Mapping[str, Any]]) -> ServiceResult[List[Row]]: ...

    def update_trade(self, trade_id: str, patch: Mapping[str, Any]) -> ServiceResult[Row]: ...

    def delete_trade(self, trade_id: str) -> ServiceResult[bool]: ...

    def delete_all_trades(self, user_id: str) -> ServiceResult[bool]: ...

    def fetch_journal_entries(self) -> ServiceResult[List[Row]]: ...

    def create_journal_entry(self, row: Mapping[str, Any]) -> ServiceResult[Row]: ...

    def update_journal_entry(self, entry_id: str, patch: Mapping[str, Any]) -> ServiceResult[Row]: ...

    def delete_journal_entry(self, entry_id: str) -> ServiceResult[bool]: ...


def _record_to_row(record: Any) -> Row:
    return {column.name: getattr(record, column.name) for column in record.__table__.columns}


class SqlTradeRepository:
    """``TradeRepository`` backed by SQLAlchemy, scoped to a single user."""

    def __init__(self, session_factory: Callable[[], Session], user_id: str) -> None:
        self._session_factory = session_factory
        self.user_id = user_id

    def _run(self, action: str, func: Callable[[Session], T]) -> ServiceResult[T]:
        try:
            with self._session_factory() as db:
                return ServiceResult(data=func(db))
        except SQLAlchemyError as exc:
            logger.error("Failed to %s for user %s: %s", action, self.user_id, exc)
            return ServiceResult(error=str(exc))

    # Trades

    def fetch_trades(self) -> ServiceResult[List[Row]]:
        def _fetch(db: Session) -> List[Row]:
            records = (
                db.query(TradeRecord)
                .filter(TradeRecord.user_id == self.user_id)
                .order_by(TradeRecord.trade_date.desc(), TradeRecord.created_at.desc())
                .all()
            )
            return [_record_to_row(record) for record in records]

        return self._run("fetch trades", _fetch)

    def create_trade(self, row: Mapping[str, Any]) -> ServiceResult[Row]:
        result = self.create_trades([row])
        if not result.ok:
            return ServiceResult(error=result.error)
        return ServiceResult(data=result.data[0])

    def create_trades(self, rows: List[Mapping[str, Any]]) -> ServiceResult[List[Row]]:
        def _create(db: Session) -> List[Row]:
            records = [TradeRecord(**dict(row), user_id=self.user_id) for row in rows]
            db.add_all(records)
            db.commit()
            for record in records:
                db.refresh(record)
            return [_record_to_row(record) for record in records]

        return self._run("create trades", _create)

    def update_trade(self, trade_id: str, patch: Mapping[str, Any]) -> ServiceResult[Row]:
        return self._update(TradeRecord, trade_id, patch, "Trade")

    def delete_trade(self, trade_id: str) -> ServiceResult[bool]:
        return self._delete(TradeRecord, trade_id)

    def delete_all_trades(self, user_id: str) -> ServiceResult[bool]:
        def _delete_all(db: Session) -> bool:
            db.query(TradeRecord).filter(TradeRecord.user_id == user_id).delete(synchronize_session=False)
            db.commit()
            return True

        return self._run("delete all trades", _delete_all)

    # Journal entries

    def fetch_journal_entries(self) -> ServiceResult[List[Row]]:
        def _fetch(db: Session) -> List[Row]:
            records = (
                db.query(JournalEntryRecord)
                .filter(JournalEntryRecord.user_id == self.user_id)
                .order_by(JournalEntryRecord.trade_date.desc(), JournalEntryRecord.created_at.desc())
                .all()
            )
            return [_record_to_row(record) for record in records]

        return self._run("fetch journal entries", _fetch)

    def create_journal_entry(self, row: Mapping[str, Any]) -> ServiceResult[Row]:
        def _create(db: Session) -> Row:
            record = JournalEntryRecord(**dict(row), user_id=self.user_id)
            db.add(record)
            db.commit()
            db.refresh(record)
            return _record_to_row(record)

        return self._run("create journal entry", _create)

    def update_journal_entry(self, entry_id: str, patch: Mapping[str, Any]) -> ServiceResult[Row]:
        return self._update(JournalEntryRecord, entry_id, patch, "Journal entry")

    def delete_journal_entry(self, entry_id: str) -> ServiceResult[bool]:
        return self._delete(JournalEntryRecord, entry_id)

    # Helpers

    def _get_owned(self, db: Session, model: Any, record_id: str) -> Any:
        record = db.get(model, record_id)
        if record is None or record.user_id != self.user_id:
            return None
        return record

    def _update(self, model: Any, record_id: str, patch: Mapping[str, Any], label: str) -> ServiceResult[Row]:
        missing = object()

        def _apply(db: Session) -> Any:
            record = self._get_owned(db, model, record_id)
            if record is None:
                return missing
            for column, value in patch.items():
                setattr(record, column, value)
            record.updated_at = utc_now()
            db.commit()
            db.refresh(record)
            return _record_to_row(record)

        result = self._run(f"update {label.lower()}", _apply)
        if result.ok and result.data is missing:
            return ServiceResult(error=f"{label} {record_id} not found")
        return result

    def _delete(self, model: Any, record_id: str) -> ServiceResult[bool]:
        def _remove(db: Session) -> bool:
            record = self._get_owned(db, model, record_id)
            if record is None:
                return False
            db.delete(record)
            db.commit()
            return True

        return self._run(f"delete {model.__tablename__}", _remove)


__all__ = ["ServiceResult", "SqlTradeRepository", "TradeRepository"]

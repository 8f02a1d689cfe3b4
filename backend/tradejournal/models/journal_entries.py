from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, String, Text

from tradejournal.utils.time import utc_now

from .base import Base


def _new_id() -> str:
    return uuid4().hex


class JournalEntryRecord(Base):
    __tablename__ = "journal_entries"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    trade_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=False, default="")
    mood = Column(String(16), nullable=True)
    lessons = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

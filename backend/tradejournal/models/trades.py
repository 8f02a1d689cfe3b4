from __future__ import annotations

from uuid import uuid4

from sqlalchemy import JSON, Column, Date, DateTime, Float, Integer, String, Text

from tradejournal.utils.time import utc_now

from .base import Base


def _new_id() -> str:
    return uuid4().hex


class TradeRecord(Base):
    __tablename__ = "trades"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    trade_date = Column(Date, nullable=False, index=True)
    symbol = Column(String(64), nullable=False)
    side = Column(String(8), nullable=False, default="long")
    entry_price = Column(Float, nullable=False, default=0.0)
    exit_price = Column(Float, nullable=True)
    quantity = Column(Float, nullable=False, default=1.0)
    pnl = Column(Float, nullable=True)
    commission = Column(Float, nullable=True, default=0.0)
    duration = Column(Integer, nullable=True)
    entry_time = Column(DateTime(timezone=True), nullable=True)
    setup = Column(String(128), nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    mistakes = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

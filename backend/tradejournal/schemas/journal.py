from __future__ import annotations

from datetime import date as date_type
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from tradejournal.services.records import JournalEntryInput

Mood = Literal["positive", "neutral", "negative"]


class JournalEntryBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date_type
    notes: str = ""
    mood: Optional[Mood] = None
    lessons: Optional[str] = None


class JournalEntryCreate(JournalEntryBase):
    def to_input(self) -> JournalEntryInput:
        return JournalEntryInput(**self.model_dump())


class JournalEntryUpdate(BaseModel):
    date: date_type | None = None
    notes: str | None = None
    mood: Optional[Mood] = None
    lessons: Optional[str] = None

    def to_patch(self) -> dict[str, object]:
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None or key in ("mood", "lessons")}


class JournalEntryResponse(JournalEntryBase):
    id: str

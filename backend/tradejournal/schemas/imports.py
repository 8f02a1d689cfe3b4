from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict


class ImportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    count: int
    errors: List[str]


class BrokerFormatResponse(BaseModel):
    id: str
    name: str
    description: str

"""Canonical player models shared across ingestion, storage and API layers."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from fmsquad.config import ATTRIBUTE_VALUE_MAX, ATTRIBUTE_VALUE_MIN


class PlayerAttribute(BaseModel):
    name: str = Field(..., min_length=1)
    value: int = Field(..., ge=ATTRIBUTE_VALUE_MIN, le=ATTRIBUTE_VALUE_MAX)
    category: str = "other"

    model_config = ConfigDict(frozen=True)


class PlayerRecord(BaseModel):
    """Normalized player payload produced by a single report import."""

    name: str = Field(..., min_length=1)
    age: int = Field(default=0, ge=0)
    current_ability: int = 0
    potential_ability: int = 0
    position: str = ""
    positions: List[str] = Field(default_factory=list)
    attributes: List[PlayerAttribute] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def attribute_map(self) -> Dict[str, int]:
        return {attr.name: attr.value for attr in self.attributes}

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class PlayerAttributeResponse(BaseModel):
    name: str
    value: int
    category: str


class ParsedPlayerResponse(BaseModel):
    name: str
    age: int
    current_ability: int
    potential_ability: int
    position: str
    positions: List[str]
    attributes: List[PlayerAttributeResponse]


class StoredPlayerResponse(BaseModel):
    player_id: int
    name: str
    age: int
    positions: List[str]
    created_at: datetime
    snapshot_id: int | None = None
    current_ability: int | None = None
    potential_ability: int | None = None
    import_date: datetime | None = None
    attributes: List[PlayerAttributeResponse] = Field(default_factory=list)


class SnapshotResponse(BaseModel):
    snapshot_id: int
    player_id: int
    import_date: datetime
    current_ability: int | None = None
    potential_ability: int | None = None
    attributes: List[PlayerAttributeResponse] = Field(default_factory=list)


class PlayerDetailResponse(StoredPlayerResponse):
    snapshots: List[SnapshotResponse] = Field(default_factory=list)


class SquadStatsResponse(BaseModel):
    total_players: int
    average_age: float
    average_current_ability: int

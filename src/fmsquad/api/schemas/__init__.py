"""Pydantic models for API I/O."""

from .importing import ImportReportResponse, ImportResultResponse, PreviewResponse
from .player import (
    ParsedPlayerResponse,
    PlayerAttributeResponse,
    PlayerDetailResponse,
    SnapshotResponse,
    SquadStatsResponse,
    StoredPlayerResponse,
)

__all__ = [
    "ImportReportResponse",
    "ImportResultResponse",
    "ParsedPlayerResponse",
    "PlayerAttributeResponse",
    "PlayerDetailResponse",
    "PreviewResponse",
    "SnapshotResponse",
    "SquadStatsResponse",
    "StoredPlayerResponse",
]

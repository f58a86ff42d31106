from __future__ import annotations

from pydantic import BaseModel, Field

from .player import ParsedPlayerResponse, StoredPlayerResponse


class ImportReportResponse(BaseModel):
    total_rows: int
    imported_rows: int
    short_rows: list[int]
    empty_rows: list[int]
    dropped_attribute_cells: int


class PreviewResponse(BaseModel):
    report: ImportReportResponse
    players: list[ParsedPlayerResponse]


class ImportResultResponse(BaseModel):
    total_players: int
    successful_imports: int
    failed_imports: int
    errors: list[str] = Field(default_factory=list)
    players: list[StoredPlayerResponse] = Field(default_factory=list)

"""REST API for importing and browsing squad data."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, Query, UploadFile

from fmsquad.api.schemas import (
    ImportReportResponse,
    ImportResultResponse,
    ParsedPlayerResponse,
    PlayerDetailResponse,
    PreviewResponse,
    SnapshotResponse,
    SquadStatsResponse,
    StoredPlayerResponse,
)
from fmsquad.ingest import REPORT_ENCODING, ImportReport, parse_report_with_diagnostics
from fmsquad.models import PlayerRecord
from fmsquad.persistence import ImportResult, SquadStats, SquadStore, StoredPlayer, StoredSnapshot


logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "fmsquad.sqlite"


def _is_html_upload(upload: UploadFile) -> bool:
    filename = (upload.filename or "").lower()
    return upload.content_type == "text/html" or filename.endswith(".html")


async def _read_report(upload: UploadFile) -> str:
    if not _is_html_upload(upload):
        raise HTTPException(status_code=400, detail="Only HTML files are allowed")
    contents = await upload.read(MAX_UPLOAD_BYTES + 1)
    if not contents:
        raise HTTPException(status_code=400, detail="No HTML file provided")
    if len(contents) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="HTML file exceeds the 10MB limit")
    try:
        return contents.decode(REPORT_ENCODING)
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="HTML file is not valid UTF-8") from exc


def report_to_response(report: ImportReport) -> ImportReportResponse:
    return ImportReportResponse(
        total_rows=report.total_rows,
        imported_rows=report.imported_rows,
        short_rows=list(report.short_rows),
        empty_rows=list(report.empty_rows),
        dropped_attribute_cells=report.dropped_attribute_cells,
    )


def record_to_response(record: PlayerRecord) -> ParsedPlayerResponse:
    return ParsedPlayerResponse.model_validate(record.model_dump())


def stored_player_to_response(player: StoredPlayer) -> StoredPlayerResponse:
    return StoredPlayerResponse.model_validate(asdict(player))


def snapshot_to_response(snapshot: StoredSnapshot) -> SnapshotResponse:
    return SnapshotResponse.model_validate(asdict(snapshot))


def stats_to_response(stats: SquadStats) -> SquadStatsResponse:
    return SquadStatsResponse.model_validate(asdict(stats))


def import_result_to_response(result: ImportResult) -> ImportResultResponse:
    return ImportResultResponse(
        total_players=result.total_players,
        successful_imports=result.successful_imports,
        failed_imports=result.failed_imports,
        errors=list(result.errors),
        players=[stored_player_to_response(player) for player in result.players],
    )


def create_app(db_path: Path | str | None = None) -> FastAPI:
    app = FastAPI(title="fmsquad importer")
    store = SquadStore(db_path or DEFAULT_DB_PATH)
    app.state.squad_store = store

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/preview", response_model=PreviewResponse)
    async def preview(html: UploadFile = File(...)) -> PreviewResponse:
        raw_text = await _read_report(html)
        records, report = parse_report_with_diagnostics(raw_text)
        return PreviewResponse(
            report=report_to_response(report),
            players=[record_to_response(record) for record in records],
        )

    @app.post("/import-html", response_model=ImportResultResponse)
    async def import_html(html: UploadFile = File(...)) -> ImportResultResponse:
        raw_text = await _read_report(html)
        logger.info("Received HTML report %s (%s chars)", html.filename, len(raw_text))
        records, report = parse_report_with_diagnostics(raw_text)
        if report.skipped_rows or report.dropped_attribute_cells:
            logger.info(
                "Report %s: %s short rows, %s rows without name or attributes, %s attribute cells dropped",
                html.filename,
                len(report.short_rows),
                len(report.empty_rows),
                report.dropped_attribute_cells,
            )
        if not records:
            raise HTTPException(status_code=400, detail="No valid players found in HTML file")
        result = store.import_records(records)
        return import_result_to_response(result)

    @app.get("/players", response_model=list[StoredPlayerResponse])
    async def list_players(limit: int = Query(100, ge=1, le=1000)) -> list[StoredPlayerResponse]:
        return [stored_player_to_response(player) for player in store.list_players(limit=limit)]

    def _fetch_player_or_404(player_id: int) -> StoredPlayer:
        player = store.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.get("/players/{player_id}", response_model=PlayerDetailResponse)
    async def get_player(player_id: int) -> PlayerDetailResponse:
        player = _fetch_player_or_404(player_id)
        return PlayerDetailResponse(
            **stored_player_to_response(player).model_dump(),
            snapshots=[snapshot_to_response(snapshot) for snapshot in store.list_snapshots(player_id)],
        )

    @app.delete("/players/{player_id}")
    async def delete_player(player_id: int) -> dict:
        if not store.delete_player(player_id):
            raise HTTPException(status_code=404, detail="Player not found")
        return {"player_id": player_id, "deleted": True}

    @app.delete("/snapshots/{snapshot_id}")
    async def delete_snapshot(snapshot_id: int) -> dict:
        if not store.delete_snapshot(snapshot_id):
            raise HTTPException(status_code=404, detail="Snapshot not found")
        return {"snapshot_id": snapshot_id, "deleted": True}

    @app.get("/squad/stats", response_model=SquadStatsResponse)
    async def squad_stats() -> SquadStatsResponse:
        return stats_to_response(store.squad_stats())

    return app

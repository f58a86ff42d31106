"""Command-line interface for importing squad report exports."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from fmsquad.ingest import REPORT_ENCODING, parse_report_table, parse_report_with_diagnostics
from fmsquad.models import PlayerRecord
from fmsquad.persistence import SquadStore


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import players from an exported squad report")
    parser.add_argument("report", type=Path, help="Path to the exported HTML report")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database to store players in")
    parser.add_argument("--output", type=Path, default=None, help="Write parsed players as JSON")
    parser.add_argument(
        "--table",
        action="store_true",
        help="Locate the player table by its header row instead of the fixed row marker",
    )
    parser.add_argument("--verbose", action="store_true", help="Log import details")
    return parser.parse_args(argv)


def _preview(items: List[str], limit: int = 5) -> str:
    preview = ", ".join(items[:limit])
    more = len(items) - limit
    return f"{preview}, +{more} more" if more > 0 else preview


def _parse(raw_text: str, *, use_table: bool) -> List[PlayerRecord]:
    if use_table:
        result = parse_report_table(raw_text)
        for warning in result.warnings:
            print(f"Warning: {warning}")
        if not result.success:
            raise SystemExit("; ".join(result.errors) or "Report could not be parsed")
        print(f"Parsed {len(result.players)} players from table")
        return result.players

    records, report = parse_report_with_diagnostics(raw_text)
    print(f"Parsed {report.imported_rows}/{report.total_rows} report rows")
    if report.short_rows:
        print(f"Short rows skipped: {_preview([str(i + 1) for i in report.short_rows])}")
    if report.empty_rows:
        print(f"Rows without name or attributes: {_preview([str(i + 1) for i in report.empty_rows])}")
    return records


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        raw_text = args.report.read_text(encoding=REPORT_ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        raise SystemExit(f"Unable to read {args.report}: {exc}") from exc

    records = _parse(raw_text, use_table=args.table)

    if args.output:
        payload = [record.model_dump() for record in records]
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote {len(records)} players to {args.output}")

    if args.db:
        result = SquadStore(args.db).import_records(records)
        print(f"Stored {result.successful_imports}/{result.total_players} players in {args.db}")
        if result.errors:
            print(f"Failed imports: {_preview(result.errors)}")


if __name__ == "__main__":
    main()

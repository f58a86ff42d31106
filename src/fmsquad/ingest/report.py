"""Parse exported squad reports into canonical player records.

The export is a flat HTML table: every data row opens with a fixed marker and
every cell is a plain ``<td>...</td>`` pair. Cells 0-4 hold the identity
fields; the remaining cells follow the attribute table in
:data:`fmsquad.config.ATTRIBUTE_CODES` order.

Parsing is lenient. Rows that do not fit the expected shape are dropped
instead of raising, and unparseable numbers count as absent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fmsquad.config import (
    ATTRIBUTE_CODES,
    ATTRIBUTE_VALUE_MAX,
    ATTRIBUTE_VALUE_MIN,
)
from fmsquad.ingest.positions import parse_position_string
from fmsquad.models import PlayerAttribute, PlayerRecord


ROW_MARKER = '<tr bgcolor="#EEEEEE">'
CELL_OPEN = "<td>"
CELL_CLOSE = "</td>"
MIN_ROW_CELLS = 5
IDENTITY_CELLS = 5
REPORT_ENCODING = "utf-8"

_LEADING_INT = re.compile(r"^\s*([+-]?)([0-9]+)")
# Longer numbers do not fit a SQLite INTEGER and are treated as unparseable.
MAX_INT_DIGITS = 18


@dataclass(frozen=True)
class ImportReport:
    total_rows: int
    imported_rows: int
    short_rows: List[int]
    empty_rows: List[int]
    dropped_attribute_cells: int

    @property
    def skipped_rows(self) -> int:
        return len(self.short_rows) + len(self.empty_rows)


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Parse the leading integer of ``raw`` ("12-15" -> 12), or None."""

    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    sign, digits = match.group(1), match.group(2).lstrip("0") or "0"
    if len(digits) > MAX_INT_DIGITS:
        return None
    return -int(digits) if sign == "-" else int(digits)


def decode_attribute_value(raw: Optional[str]) -> Optional[int]:
    value = parse_int(raw)
    if value is None or not ATTRIBUTE_VALUE_MIN <= value <= ATTRIBUTE_VALUE_MAX:
        return None
    return value


def split_rows(raw_text: str) -> List[str]:
    return raw_text.split(ROW_MARKER)[1:]


def split_cells(row: str) -> List[str]:
    return [cell.split(CELL_CLOSE, 1)[0].strip() for cell in row.split(CELL_OPEN)[1:]]


def _decode_attributes(cells: Sequence[str]) -> Tuple[List[PlayerAttribute], int]:
    attributes: List[PlayerAttribute] = []
    dropped = 0
    for index, attr in enumerate(ATTRIBUTE_CODES):
        cell_index = IDENTITY_CELLS + index
        if cell_index >= len(cells):
            break
        value = decode_attribute_value(cells[cell_index])
        if value is None:
            dropped += 1
            continue
        attributes.append(PlayerAttribute(name=attr.name, value=value, category=attr.category))
    return attributes, dropped


def _cells_to_record(cells: Sequence[str]) -> Tuple[Optional[PlayerRecord], int]:
    name = cells[0]
    attributes, dropped = _decode_attributes(cells)
    if not name or not attributes:
        return None, dropped
    position = cells[4]
    record = PlayerRecord(
        name=name,
        age=max(0, parse_int(cells[1]) or 0),
        current_ability=parse_int(cells[2]) or 0,
        potential_ability=parse_int(cells[3]) or 0,
        position=position,
        positions=parse_position_string(position),
        attributes=attributes,
    )
    return record, dropped


def parse_report_with_diagnostics(raw_text: str) -> Tuple[List[PlayerRecord], ImportReport]:
    """Parse a report and describe the rows and cells that were dropped."""

    records: List[PlayerRecord] = []
    short_rows: List[int] = []
    empty_rows: List[int] = []
    dropped_cells = 0

    rows = split_rows(raw_text)
    for row_index, row in enumerate(rows):
        cells = split_cells(row)
        if len(cells) < MIN_ROW_CELLS:
            short_rows.append(row_index)
            continue
        record, dropped = _cells_to_record(cells)
        dropped_cells += dropped
        if record is None:
            empty_rows.append(row_index)
            continue
        records.append(record)

    report = ImportReport(
        total_rows=len(rows),
        imported_rows=len(records),
        short_rows=short_rows,
        empty_rows=empty_rows,
        dropped_attribute_cells=dropped_cells,
    )
    return records, report


def parse_report(raw_text: str) -> List[PlayerRecord]:
    """Return one record per usable report row, in row order."""

    records, _ = parse_report_with_diagnostics(raw_text)
    return records

"""Header-aware parser for squad report tables.

Unlike :func:`fmsquad.ingest.report.parse_report`, this parser locates the
player table through its header row, so it copes with exports whose row
markup differs. Problems are collected as messages rather than raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from fmsquad.config import get_attribute_by_name, resolve_header
from fmsquad.ingest.positions import parse_position_string
from fmsquad.ingest.report import decode_attribute_value, parse_int
from fmsquad.models import PlayerAttribute, PlayerRecord


REQUIRED_COLUMNS: Tuple[str, ...] = ("Name", "Age", "CA", "PA", "Position")
_EMPTY_CELL_TOKENS = {"", "-"}


@dataclass(frozen=True)
class TableParseResult:
    success: bool
    players: List[PlayerRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _is_player_header(row: Optional[Tag], *, require_ability: bool = True) -> bool:
    if row is None:
        return False
    text = row.get_text(" ").lower()
    if "name" not in text or "age" not in text:
        return False
    return "ca" in text if require_ability else True


def _find_player_table(soup: BeautifulSoup) -> Optional[Tag]:
    for table in soup.find_all("table"):
        if _is_player_header(table.find("tr")):
            return table
    return None


def _parse_headers(table: Tag) -> Dict[str, int]:
    header_row = table.find("tr")
    header_index: Dict[str, int] = {}
    if header_row is None:
        return header_index
    for index, cell in enumerate(header_row.find_all(["th", "td"])):
        label = cell.get_text(strip=True)
        if not label:
            continue
        full_name = resolve_header(label)
        header_index.setdefault(full_name, index)
    return header_index


def _cell_text(cells: Sequence[Tag], index: Optional[int]) -> str:
    if index is None or index >= len(cells):
        return ""
    return cells[index].get_text(strip=True)


def _parse_player_row(cells: Sequence[Tag], header_index: Dict[str, int]) -> PlayerRecord:
    name = _cell_text(cells, header_index.get("Name"))
    age_text = _cell_text(cells, header_index.get("Age"))
    position = _cell_text(cells, header_index.get("Position"))
    if not name or not age_text or not position:
        raise ValueError("Missing required player data")

    age = parse_int(age_text)
    if age is None or age < 0:
        raise ValueError(f"Invalid age: {age_text}")

    attributes: List[PlayerAttribute] = []
    for header, index in header_index.items():
        attr = get_attribute_by_name(header)
        if attr is None:
            continue
        raw = _cell_text(cells, index)
        if raw in _EMPTY_CELL_TOKENS:
            continue
        value = decode_attribute_value(raw)
        if value is not None:
            attributes.append(PlayerAttribute(name=attr.name, value=value, category=attr.category))
    if not attributes:
        raise ValueError(f"No attribute values for {name}")

    return PlayerRecord(
        name=name,
        age=age,
        current_ability=parse_int(_cell_text(cells, header_index.get("CA"))) or 0,
        potential_ability=parse_int(_cell_text(cells, header_index.get("PA"))) or 0,
        position=position,
        positions=parse_position_string(position),
        attributes=attributes,
    )


def parse_report_table(html: str) -> TableParseResult:
    """Parse the first player table found in ``html``."""

    table = _find_player_table(_soup(html))
    if table is None:
        return TableParseResult(success=False, errors=["No player data table found in HTML"])

    header_index = _parse_headers(table)
    if not header_index:
        return TableParseResult(success=False, errors=["No valid headers found in table"])

    rows = [row for row in table.find_all("tr")[1:] if row.find_all("td")]
    if not rows:
        return TableParseResult(success=False, errors=["No player data rows found"])

    missing = [column for column in REQUIRED_COLUMNS if column not in header_index]
    if missing:
        return TableParseResult(
            success=False,
            errors=[f"Missing required columns: {', '.join(missing)}"],
        )

    players: List[PlayerRecord] = []
    warnings: List[str] = []
    for row_number, row in enumerate(rows, start=1):
        try:
            players.append(_parse_player_row(row.find_all("td"), header_index))
        except ValueError as exc:
            warnings.append(f"Failed to parse player row {row_number}: {exc}")

    if not players:
        return TableParseResult(
            success=False,
            errors=["No valid players could be parsed"],
            warnings=warnings,
        )
    return TableParseResult(success=True, players=players, warnings=warnings)


def validate_report_structure(html: str) -> List[str]:
    """Return structural problems with ``html``; an empty list means it looks importable."""

    soup = _soup(html)
    tables = soup.find_all("table")
    errors: List[str] = []
    if not tables:
        errors.append("No HTML table found")
    if not any(_is_player_header(table.find("tr"), require_ability=False) for table in tables):
        errors.append("No valid player data table found")
    return errors

"""Input adapters that normalize exported squad reports."""

from .positions import parse_position_string
from .report import (
    REPORT_ENCODING,
    ImportReport,
    parse_report,
    parse_report_with_diagnostics,
)
from .table import TableParseResult, parse_report_table, validate_report_structure

__all__ = [
    "REPORT_ENCODING",
    "ImportReport",
    "TableParseResult",
    "parse_position_string",
    "parse_report",
    "parse_report_table",
    "parse_report_with_diagnostics",
    "validate_report_structure",
]

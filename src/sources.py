"""
Source detection and data extraction utilities.

Reads an uploaded CSV or XLSX spreadsheet into the input the bulk-upload
normalizer expects: the header row as an explicit left-to-right list plus one
dictionary per data row.
"""

import csv
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from openpyxl import load_workbook

from transforms import to_safe_string

logger = logging.getLogger(__name__)

EMPTY_HEADER = "__EMPTY"


class UnsupportedSourceError(ValueError):
    """Raised when a file type cannot be read."""
    pass


class SourceType(Enum):
    """Supported data source types."""
    XLSX = "xlsx_file"
    CSV = "csv"
    UNKNOWN = "unknown"


@dataclass
class RawTable:
    """
    Raw spreadsheet contents.

    Attributes:
        headers: Header keys in left-to-right column order
        rows: One dict per data row, keyed by header; blank cells are ""
    """
    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)


def detect_source_type(source: Union[str, Path]) -> SourceType:
    """
    Detect the type of data source from its file extension.

    Args:
        source: File path

    Returns:
        SourceType enum value
    """
    suffix = Path(str(source)).suffix.lower()
    if suffix in (".xlsx", ".xlsm"):
        return SourceType.XLSX
    if suffix == ".csv":
        return SourceType.CSV
    return SourceType.UNKNOWN


def _cell_value(cell: Any) -> Any:
    """Convert an openpyxl cell value; numbers stay numbers."""
    if cell is None:
        return ""
    if isinstance(cell, (datetime, date, time)):
        return cell.isoformat()
    if isinstance(cell, str):
        return cell.strip()
    return cell


def _read_xlsx(file_path: Path) -> List[List[Any]]:
    # data_only=True returns the cached result of formulas, not the formula text
    workbook = load_workbook(file_path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows = [[_cell_value(cell) for cell in row] for row in sheet.iter_rows(values_only=True)]
        logger.debug(f"[Source] read {len(rows)} row(s) from sheet '{sheet.title}' of {file_path.name}")
    finally:
        workbook.close()
    return rows


def _read_csv(file_path: Path) -> List[List[Any]]:
    with open(file_path, "r", encoding="utf-8-sig", newline="") as f:
        rows = [list(row) for row in csv.reader(f)]
    logger.debug(f"[Source] read {len(rows)} row(s) from {file_path.name}")
    return rows


def extract_from_source(
    source: Union[str, Path],
    source_type: Optional[SourceType] = None,
) -> List[List[Any]]:
    """
    Extract raw 2D data from a spreadsheet file.

    Args:
        source: File path
        source_type: Optional explicit source type (auto-detected if not provided)

    Returns:
        2D list of values (rows x columns); for XLSX only the first sheet

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedSourceError: If the file type is not CSV or XLSX
    """
    file_path = Path(source)
    if source_type is None:
        source_type = detect_source_type(file_path)

    if source_type == SourceType.UNKNOWN:
        raise UnsupportedSourceError(f"Unsupported spreadsheet type: {file_path.name}")
    if not file_path.exists():
        raise FileNotFoundError(f"Spreadsheet not found: {file_path}")

    if source_type == SourceType.XLSX:
        return _read_xlsx(file_path)
    return _read_csv(file_path)


def _unique_headers(header_row: List[Any]) -> List[str]:
    """
    Clean header cells into unique keys.

    Blank headers become "__EMPTY", "__EMPTY_1", ...; repeated names get
    "_1", "_2", ... suffixes in order of appearance.
    """
    headers = []
    counts: Dict[str, int] = {}
    for cell in header_row:
        base = to_safe_string(cell) or EMPTY_HEADER
        name = base
        while name in counts:
            counts[base] += 1
            name = f"{base}_{counts[base]}"
        counts.setdefault(name, 0)
        headers.append(name)
    return headers


def rows2d_to_objects(values: List[List[Any]], header_row_index: int = 0) -> RawTable:
    """
    Convert a 2D list to a RawTable.

    Args:
        values: 2D list where row ``header_row_index`` contains headers
        header_row_index: Index of the row containing headers (default: 0)

    Returns:
        RawTable with ordered headers and one dict per data row
    """
    if not values or len(values) <= header_row_index:
        return RawTable()

    header_row = list(values[header_row_index])
    width = max(len(row) for row in values[header_row_index:])
    header_row += [""] * (width - len(header_row))
    headers = _unique_headers(header_row)

    rows = []
    for row in values[header_row_index + 1:]:
        obj = {}
        for i, header in enumerate(headers):
            value = row[i] if i < len(row) else ""
            obj[header] = "" if value is None else value
        rows.append(obj)

    return RawTable(headers=headers, rows=rows)


def load_raw_table(source: Union[str, Path], header_row_index: int = 0) -> RawTable:
    """
    Read a CSV/XLSX file into a RawTable ready for process_bulk_upload.

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedSourceError: If the file type is not CSV or XLSX
    """
    return rows2d_to_objects(extract_from_source(source), header_row_index=header_row_index)

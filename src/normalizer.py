"""
Bulk-upload dataset normalizer.

Turns raw spreadsheet rows into normalized vehicle or driver records:
column mapping is detected once per dataset, every row is normalized through
the field transforms, duplicates are dropped and each surviving row is
validated. Nothing here raises on row content; problems surface as issue
strings next to the row.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from column_mapper import detect_column_mappings
from config import MAX_BULK_ROWS
from schema import (
    ColumnMapping,
    DriverRow,
    EntityMode,
    NormalizationError,
    NormalizedRow,
    ROW_TYPES,
    VehicleRow,
    validate_row,
)
from transforms import FIELD_TRANSFORMS, build_extra_fields, to_safe_string

logger = logging.getLogger(__name__)

__all__ = [
    "NormalizationError",
    "BulkUploadResult",
    "normalize_row",
    "normalize_dataset",
    "normalize_vehicle_dataset",
    "normalize_driver_dataset",
    "is_blank_row",
    "drop_empty_rows",
    "dedupe_rows",
    "dedupe_rows_by_content",
    "process_bulk_upload",
]


@dataclass
class BulkUploadResult:
    """
    Outcome of one spreadsheet import.

    Attributes:
        mode: Entity mode the rows were normalized for
        mapping: Canonical field -> raw header key used for every row
        rows: Normalized rows that survived blank filtering, dedupe and the row limit
        issues: Validation issues, parallel to ``rows``
        total_rows: Raw rows received
        blank_rows: Raw rows dropped because every cell was blank
        duplicate_rows: Rows dropped by dedupe
        truncated_rows: Rows dropped by the row limit
    """
    mode: EntityMode
    mapping: ColumnMapping = field(default_factory=dict)
    rows: List[NormalizedRow] = field(default_factory=list)
    issues: List[List[str]] = field(default_factory=list)
    total_rows: int = 0
    blank_rows: int = 0
    duplicate_rows: int = 0
    truncated_rows: int = 0

    @property
    def valid_count(self) -> int:
        return sum(1 for row_issues in self.issues if not row_issues)

    @property
    def issue_count(self) -> int:
        return sum(1 for row_issues in self.issues if row_issues)


def normalize_row(
    row: Dict[str, Any],
    mode: Union[str, EntityMode],
    mapping: ColumnMapping,
    source_index: Optional[int] = None,
) -> NormalizedRow:
    """
    Normalize one raw row with a mapping computed for its dataset.

    Unmapped fields go through their transform with an empty value, which
    yields "" (or "Employee" for role).

    Args:
        row: Raw row
        mode: Entity mode
        mapping: Canonical field -> raw header key
        source_index: Index of the row in the uploaded sheet

    Returns:
        VehicleRow or DriverRow
    """
    mode = EntityMode.parse(mode)
    row = row or {}
    values = {}
    for field_name in mode.fields:
        raw_key = mapping.get(field_name)
        raw_value = row.get(raw_key, "") if raw_key is not None else ""
        values[field_name] = FIELD_TRANSFORMS[field_name](raw_value)

    extra = build_extra_fields(row, mapping.values())
    return ROW_TYPES[mode](extra=extra, source_index=source_index, **values)


def normalize_dataset(
    rows: List[Dict[str, Any]],
    mode: Union[str, EntityMode],
    headers: Optional[Iterable[str]] = None,
    source_indices: Optional[Sequence[int]] = None,
) -> Tuple[ColumnMapping, List[NormalizedRow]]:
    """
    Detect the column mapping for a dataset and normalize every row.

    Args:
        rows: Raw rows in sheet order
        mode: "vehicle" or "driver"
        headers: Optional explicit column order (tie-breaking)
        source_indices: Sheet index of each row (defaults to position in ``rows``)

    Returns:
        Tuple of (mapping, normalized rows in input order)
    """
    mode = EntityMode.parse(mode)
    mapping = detect_column_mappings(rows, mode, headers=headers)
    if source_indices is None:
        source_indices = range(len(rows))
    normalized = [
        normalize_row(row, mode, mapping, source_index=index)
        for row, index in zip(rows, source_indices)
    ]
    return mapping, normalized


def normalize_vehicle_dataset(rows: List[Dict[str, Any]], headers: Optional[Iterable[str]] = None) -> List[VehicleRow]:
    """Normalize raw rows as vehicles."""
    return normalize_dataset(rows, EntityMode.VEHICLE, headers=headers)[1]


def normalize_driver_dataset(rows: List[Dict[str, Any]], headers: Optional[Iterable[str]] = None) -> List[DriverRow]:
    """Normalize raw rows as drivers."""
    return normalize_dataset(rows, EntityMode.DRIVER, headers=headers)[1]


def is_blank_row(row: Optional[Dict[str, Any]]) -> bool:
    """True if the row has no cell with a non-blank value."""
    return not any(to_safe_string(value) for value in (row or {}).values())


def drop_empty_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Remove rows that are empty or contain only empty/None values.

    Args:
        rows: List of raw row dictionaries

    Returns:
        List of dictionaries with empty rows removed
    """
    return [row for row in rows if not is_blank_row(row)]


def dedupe_rows(rows: List[NormalizedRow], key: str) -> List[NormalizedRow]:
    """
    Drop rows whose ``key`` value already appeared in an earlier row.

    Rows with an empty key value are always kept. Order is preserved.

    Args:
        rows: Normalized rows in sheet order
        key: Canonical field to dedupe on

    Returns:
        Rows with later duplicates removed
    """
    seen = set()
    kept = []
    for row in rows:
        value = row.get(key)
        if not value:
            kept.append(row)
            continue
        if value not in seen:
            kept.append(row)
        seen.add(value)
    dropped = len(rows) - len(kept)
    if dropped:
        logger.debug(f"[Dedupe] dropped {dropped} duplicate row(s) on '{key}'")
    return kept


def dedupe_rows_by_content(rows: List[NormalizedRow]) -> List[NormalizedRow]:
    """
    Drop rows whose canonical fields all repeat an earlier row.

    The extra bag and source index are not compared.
    """
    seen = set()
    kept = []
    for row in rows:
        signature = (type(row).__name__,) + tuple(row.get(name) for name in row.canonical_fields())
        if signature in seen:
            continue
        seen.add(signature)
        kept.append(row)
    dropped = len(rows) - len(kept)
    if dropped:
        logger.debug(f"[Dedupe] dropped {dropped} row(s) with repeated content")
    return kept


def process_bulk_upload(
    rows: List[Dict[str, Any]],
    mode: Union[str, EntityMode],
    headers: Optional[Iterable[str]] = None,
    dedupe_key: Optional[str] = None,
    max_rows: Optional[int] = MAX_BULK_ROWS,
) -> BulkUploadResult:
    """
    Run the whole bulk-upload pipeline on one spreadsheet.

    Steps: drop blank rows, detect the column mapping and normalize, dedupe,
    apply the row limit, validate.

    Args:
        rows: Raw rows as produced by the spreadsheet reader
        mode: "vehicle" or "driver" (plural forms accepted)
        headers: Optional explicit column order from the source file
        dedupe_key: Canonical field to dedupe on (defaults per mode:
            registration_no for vehicles, name for drivers)
        max_rows: Keep at most this many rows after dedupe (None for no limit)

    Returns:
        BulkUploadResult with normalized rows and parallel issue lists

    Raises:
        NormalizationError: If ``mode`` is not a known entity mode
    """
    mode = EntityMode.parse(mode)
    rows = list(rows or [])
    dedupe_key = dedupe_key or mode.dedupe_key

    indexed = [(index, row) for index, row in enumerate(rows) if not is_blank_row(row)]
    blank_rows = len(rows) - len(indexed)

    mapping, normalized = normalize_dataset(
        [row for _, row in indexed],
        mode,
        headers=headers,
        source_indices=[index for index, _ in indexed],
    )

    deduped = dedupe_rows(normalized, dedupe_key)
    duplicate_rows = len(normalized) - len(deduped)

    truncated_rows = 0
    if max_rows is not None and len(deduped) > max_rows:
        truncated_rows = len(deduped) - max_rows
        deduped = deduped[:max_rows]

    issues = [validate_row(row) for row in deduped]

    result = BulkUploadResult(
        mode=mode,
        mapping=mapping,
        rows=deduped,
        issues=issues,
        total_rows=len(rows),
        blank_rows=blank_rows,
        duplicate_rows=duplicate_rows,
        truncated_rows=truncated_rows,
    )
    logger.info(
        f"[BulkUpload] {mode.value}: {len(rows)} raw row(s) -> {len(deduped)} kept "
        f"({blank_rows} blank, {duplicate_rows} duplicate, {truncated_rows} over limit), "
        f"{result.issue_count} with issues"
    )
    return result

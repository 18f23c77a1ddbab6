"""
Review helpers for normalized bulk uploads.

Pure functions the upload screen runs between normalization and submission:
editing and removing rows, folding backend failures into the issue lists,
filtering by status and building the request body. Inputs are never mutated;
every helper returns fresh lists.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from schema import DriverRow, EntityMode, NormalizedRow, VehicleRow, validate_row
from transforms import DEFAULT_ROLE, apply_field_transform

logger = logging.getLogger(__name__)

ROW_STATUSES = ("all", "valid", "issue")


def revalidate_rows(rows: List[NormalizedRow]) -> List[List[str]]:
    """Validate every row again, e.g. before submitting."""
    return [validate_row(row) for row in rows]


def has_blocking_issues(issues: Iterable[List[str]]) -> bool:
    """True if any row has at least one issue."""
    return any(row_issues for row_issues in issues)


def apply_row_edit(
    rows: List[NormalizedRow],
    issues: List[List[str]],
    index: int,
    changes: Dict[str, Any],
) -> Tuple[List[NormalizedRow], List[List[str]]]:
    """
    Apply a user's edit to one row and re-validate it.

    Edited values go through the same field transforms as uploaded values,
    so the row stays normalized. The extra bag and source index are kept.

    Args:
        rows: Current rows
        issues: Current issue lists, parallel to ``rows``
        index: Position of the edited row
        changes: Canonical field -> new raw value

    Returns:
        Tuple of (rows, issues) with the edited row replaced

    Raises:
        IndexError: If ``index`` is out of range
        KeyError: If a changed field is not a canonical field of the row
    """
    if not 0 <= index < len(rows):
        raise IndexError(f"Row index {index} out of range for {len(rows)} row(s)")

    row = rows[index]
    allowed = row.canonical_fields()
    updates = {}
    for name, value in changes.items():
        if name not in allowed:
            raise KeyError(f"'{name}' is not an editable field of {type(row).__name__}")
        updates[name] = apply_field_transform(name, value)

    edited = replace(row, **updates)
    next_rows = list(rows)
    next_rows[index] = edited

    next_issues = [list(row_issues) for row_issues in issues]
    next_issues[index] = validate_row(edited)
    logger.debug(f"[Review] row {index} edited: {updates}, issues={next_issues[index]}")
    return next_rows, next_issues


def remove_row(
    rows: List[NormalizedRow],
    issues: List[List[str]],
    index: int,
) -> Tuple[List[NormalizedRow], List[List[str]]]:
    """
    Drop one row and its issue list.

    Raises:
        IndexError: If ``index`` is out of range
    """
    if not 0 <= index < len(rows):
        raise IndexError(f"Row index {index} out of range for {len(rows)} row(s)")
    next_rows = rows[:index] + rows[index + 1:]
    next_issues = [list(row_issues) for i, row_issues in enumerate(issues) if i != index]
    return next_rows, next_issues


def merge_backend_failures(
    issues: List[List[str]],
    failures: Optional[Iterable[Dict[str, Any]]],
) -> List[List[str]]:
    """
    Append failures reported by the bulk endpoint to the matching rows.

    Each failure looks like ``{"index": 3, "errors": ["..."]}``. Entries
    without an integer index, or pointing past the last row, are skipped.

    Args:
        issues: Current issue lists
        failures: The ``failed`` list of the bulk response (may be None)

    Returns:
        New issue lists
    """
    merged = [list(row_issues) for row_issues in issues]
    for failure in failures or []:
        if not isinstance(failure, dict):
            continue
        index = failure.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            continue
        if not 0 <= index < len(merged):
            logger.warning(f"[Review] backend failure for unknown row {index} ignored")
            continue
        errors = failure.get("errors") or []
        if isinstance(errors, str):
            errors = [errors]
        merged[index].extend(str(error) for error in errors)
    return merged


def filter_rows_by_status(
    rows: List[NormalizedRow],
    issues: List[List[str]],
    status: str = "all",
) -> List[Tuple[int, NormalizedRow, List[str]]]:
    """
    List rows with their position and issues, optionally by status.

    Args:
        rows: Normalized rows
        issues: Issue lists, parallel to ``rows``
        status: "all", "valid" (no issues) or "issue" (at least one issue)

    Returns:
        List of (index, row, issues) tuples in row order

    Raises:
        ValueError: If ``status`` is not one of ROW_STATUSES
    """
    if status not in ROW_STATUSES:
        raise ValueError(f"Unknown row status filter: {status!r}")
    selected = []
    for index, row in enumerate(rows):
        row_issues = issues[index] if index < len(issues) else []
        if status == "valid" and row_issues:
            continue
        if status == "issue" and not row_issues:
            continue
        selected.append((index, row, list(row_issues)))
    return selected


def _vehicle_record(row: VehicleRow) -> Dict[str, Any]:
    record = {"registration_no": row.registration_no}
    if row.vehicle_type:
        record["vehicle_type"] = row.vehicle_type
    if row.chassis_number:
        record["chassis_number"] = row.chassis_number
    record["extra"] = dict(row.extra or {})
    return record


def _driver_record(row: DriverRow) -> Dict[str, Any]:
    record = {"name": row.name, "role": row.role or DEFAULT_ROLE}
    if row.vehicle_registration_no:
        record["vehicle_registration_no"] = row.vehicle_registration_no
    return record


def build_payload(
    mode: Union[str, EntityMode],
    rows: List[NormalizedRow],
    dry_run: bool = False,
    upsert: bool = True,
) -> Dict[str, Any]:
    """
    Build the JSON body for the bulk endpoint.

    Empty optional fields are left out of each record.

    Args:
        mode: Entity mode of the rows
        rows: Normalized rows to submit
        dry_run: Ask the backend to validate without writing
        upsert: Update existing records instead of failing on conflicts

    Returns:
        Dictionary with "records", "dry_run" and "upsert"
    """
    mode = EntityMode.parse(mode)
    to_record = _vehicle_record if mode is EntityMode.VEHICLE else _driver_record
    return {
        "records": [to_record(row) for row in rows],
        "dry_run": bool(dry_run),
        "upsert": bool(upsert),
    }

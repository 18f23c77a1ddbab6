"""
Content inference for bulk-upload spreadsheets.

This module holds the shape predicates used to recognise registration
numbers, chassis numbers and vehicle types in cell values, and the column
profiler that counts how many values of each column match them. The mapper
uses the counts to pick columns whose headers give no hint.
"""

import re
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from mappings import sanitize_key, score_header_aliases
from schema import ColumnStats, EntityMode
from transforms import to_safe_string

logger = logging.getLogger(__name__)

# Indian-style plate: 2 letters, 1-2 digits, 1-2 letters, 3-4 digits (KA01AB1234)
REGISTRATION_VALUE_PATTERN = re.compile(r"^[A-Z]{2}\d{1,2}[A-Z]{1,2}\d{3,4}$", re.IGNORECASE)

# Looser plate-like token, letters/digits/hyphens
EXTENDED_REGISTRATION_PATTERN = re.compile(r"^[A-Z0-9-]{6,12}$", re.IGNORECASE)

STRONG_CHASSIS_PATTERN = re.compile(r"^[A-Z0-9]{10,}$", re.IGNORECASE)

# VIN length
CHASSIS_VIN_LENGTH = 17

MODEL_NUMBER_PATTERN = re.compile(r"^[A-Z0-9-]{3,}$", re.IGNORECASE)

VEHICLE_TYPE_PATTERN = re.compile(r"truck|van|bus|car|tractor|pickup|suv|tempo", re.IGNORECASE)

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")


def _alphanumeric(value: str) -> str:
    return _NON_ALPHANUMERIC.sub("", value.upper())


def looks_like_registration(value: str, header: str = "") -> bool:
    """
    Check whether a value is shaped like a vehicle registration number.

    Two checks are kept: the strict plate shape, and a broader
    6-12 character alphanumeric-with-hyphens token whose alphanumeric part
    is between 6 and 13 characters long.

    Args:
        value: Trimmed cell value
        header: Unused, accepted so every predicate has the same signature

    Returns:
        True if either check passes
    """
    if not value:
        return False
    if REGISTRATION_VALUE_PATTERN.match(value):
        return True
    normalized_length = len(_alphanumeric(value))
    return bool(EXTENDED_REGISTRATION_PATTERN.match(value)) and 5 < normalized_length <= 13


def looks_like_chassis(value: str, header: str = "") -> bool:
    """Check for a 10+ character alphanumeric token or a VIN-length value."""
    if not value:
        return False
    normalized_length = len(_alphanumeric(value))
    if STRONG_CHASSIS_PATTERN.match(value) and normalized_length >= 10:
        return True
    return normalized_length == CHASSIS_VIN_LENGTH


def looks_like_vehicle_type(value: str, header: str = "") -> bool:
    """
    Check for a vehicle category keyword, or a model code under a "model" header.

    Args:
        value: Trimmed cell value
        header: Raw header of the column the value came from

    Returns:
        True if the value names a vehicle category (truck, van, bus, ...) or
        the header mentions "model" and the value looks like a model code
    """
    if not value:
        return False
    if VEHICLE_TYPE_PATTERN.search(value):
        return True
    return "model" in sanitize_key(header) and bool(MODEL_NUMBER_PATTERN.match(value))


PATTERNS: Dict[str, Callable[[str, str], bool]] = {
    "registration": looks_like_registration,
    "chassis": looks_like_chassis,
    "vehicle_type": looks_like_vehicle_type,
}

# canonical field -> name of the predicate in PATTERNS
FIELD_PATTERNS: Dict[str, Optional[str]] = {
    "registration_no": "registration",
    "vehicle_registration_no": "registration",
    "chassis_number": "chassis",
    "vehicle_type": "vehicle_type",
    "name": None,
    "role": None,
}


def patterns_for_mode(mode: Union[str, EntityMode]) -> List[str]:
    """Names of the predicates relevant to a mode's canonical fields."""
    mode = EntityMode.parse(mode)
    names = []
    for field in mode.fields:
        pattern = FIELD_PATTERNS.get(field)
        if pattern and pattern not in names:
            names.append(pattern)
    return names


def ordered_headers(rows: List[Dict[str, Any]], headers: Optional[Iterable[str]] = None) -> List[str]:
    """
    Header keys in column order.

    Explicit headers come first, in the order given; keys seen in the rows
    but missing from ``headers`` follow in first-seen order.
    """
    ordered = []
    seen = set()
    for key in headers or []:
        if key not in seen:
            seen.add(key)
            ordered.append(key)
    for row in rows:
        for key in (row or {}):
            if key not in seen:
                seen.add(key)
                ordered.append(key)
    return ordered


def profile_columns(
    rows: List[Dict[str, Any]],
    mode: Union[str, EntityMode],
    headers: Optional[Iterable[str]] = None,
) -> Dict[str, ColumnStats]:
    """
    Build per-column statistics for a dataset.

    Args:
        rows: Raw rows (header -> cell value)
        mode: Entity mode selecting the alias and pattern sets
        headers: Optional explicit left-to-right column order

    Returns:
        Ordered dictionary of header key -> ColumnStats. Columns with no
        non-blank value are kept with total 0.
    """
    mode = EntityMode.parse(mode)
    pattern_names = patterns_for_mode(mode)
    keys = ordered_headers(rows, headers)

    totals = {key: 0 for key in keys}
    matches = {key: {name: 0 for name in pattern_names} for key in keys}

    for row in rows:
        for key in keys:
            value = to_safe_string((row or {}).get(key))
            if not value:
                continue
            totals[key] += 1
            for name in pattern_names:
                if PATTERNS[name](value, key):
                    matches[key][name] += 1

    stats = {}
    for index, key in enumerate(keys):
        stats[key] = ColumnStats(
            key=key,
            index=index,
            total=totals[key],
            pattern_matches=matches[key],
            alias_score=score_header_aliases(key, mode),
        )
        logger.debug(
            f"[Profiler] column '{key}' (#{index}): total={totals[key]}, "
            f"matches={matches[key]}, aliases={stats[key].alias_score}"
        )
    return stats

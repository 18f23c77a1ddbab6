"""
Column mapping for bulk uploads.

Decides, once per dataset, which raw spreadsheet column feeds each canonical
field. Header aliases and content match rates are combined into one score per
column; fields claim their best column greedily in priority order and a
claimed column is never offered to another field.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from config import CONTENT_MATCH_THRESHOLD
from inference import FIELD_PATTERNS, profile_columns
from schema import ColumnMapping, ColumnStats, EntityMode

logger = logging.getLogger(__name__)


def score_column(stats: ColumnStats, field: str) -> float:
    """
    Score one column as a candidate for one canonical field.

    score = alias bonus + match rate (percent), where the match rate only
    counts when it exceeds CONTENT_MATCH_THRESHOLD.

    Args:
        stats: Column statistics
        field: Canonical field name

    Returns:
        Score (0 when the column has no non-blank values)
    """
    if stats.total <= 0:
        return 0.0

    score = float(stats.alias_score.get(field, 0))

    rate = stats.match_rate(FIELD_PATTERNS.get(field))
    if rate > CONTENT_MATCH_THRESHOLD:
        score += rate

    return score


def find_best_column(
    column_stats: Dict[str, ColumnStats],
    field: str,
    used_keys: Set[str],
) -> Optional[str]:
    """
    Pick the unused column with the strictly highest positive score.

    Columns are visited in column order and only a strictly greater score
    replaces the current best, so ties go to the leftmost column.

    Returns:
        Header key, or None if no column scores above zero
    """
    best_key = None
    best_score = 0.0
    for stats in sorted(column_stats.values(), key=lambda s: s.index):
        if stats.key in used_keys:
            continue
        score = score_column(stats, field)
        if score > best_score:
            best_score = score
            best_key = stats.key
    if best_key is not None:
        logger.debug(f"[Mapper] {field} -> '{best_key}' (score={best_score:.1f})")
    else:
        logger.debug(f"[Mapper] {field} left unmapped")
    return best_key


def map_columns(column_stats: Dict[str, ColumnStats], mode: Union[str, EntityMode]) -> ColumnMapping:
    """
    Assign columns to the mode's canonical fields from precomputed stats.

    Args:
        column_stats: Output of profile_columns
        mode: Entity mode (its field order is the assignment priority)

    Returns:
        Injective mapping of canonical field -> raw header key; fields with
        no candidate are absent
    """
    mode = EntityMode.parse(mode)
    mapping = {}
    used_keys = set()
    for field in mode.fields:
        key = find_best_column(column_stats, field, used_keys)
        if key is not None:
            mapping[field] = key
            used_keys.add(key)
    return mapping


def detect_column_mappings(
    rows: List[Dict[str, Any]],
    mode: Union[str, EntityMode],
    headers: Optional[Iterable[str]] = None,
) -> ColumnMapping:
    """
    Profile a dataset and map its columns to canonical fields.

    Args:
        rows: Raw rows
        mode: "vehicle" or "driver" (plural forms accepted)
        headers: Optional explicit column order used for tie-breaking

    Returns:
        Mapping of canonical field -> raw header key
    """
    if not rows:
        return {}
    mode = EntityMode.parse(mode)
    column_stats = profile_columns(rows, mode, headers=headers)
    mapping = map_columns(column_stats, mode)
    logger.debug(f"[Mapper] {mode.value} mapping: {mapping}")
    return mapping

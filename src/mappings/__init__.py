"""
Mappings module - Header alias tables and alias scoring for bulk uploads
"""

import re
from typing import Any, Dict, List, Union

from config import ALIAS_HEADER_BONUS
from schema import EntityMode

from .vehicles_mappings import VEHICLES_MAPPINGS
from .drivers_mappings import DRIVERS_MAPPINGS

MAPPINGS_BY_MODE = {
    EntityMode.VEHICLE: VEHICLES_MAPPINGS,
    EntityMode.DRIVER: DRIVERS_MAPPINGS,
}

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def sanitize_key(key: Any) -> str:
    """
    Reduce a header to lowercase letters and digits.

    "Vehicle No." -> "vehicleno", "REG_NO" -> "regno"
    """
    if key is None:
        return ""
    return _NON_ALPHANUMERIC.sub("", str(key).strip().lower())


def get_mapping_by_id(mapping_id: str):
    """
    Get a mapping configuration by its ID.

    Args:
        mapping_id: The unique ID of the mapping configuration

    Returns:
        Mapping configuration dictionary or None if not found
    """
    for mapping in MAPPINGS_BY_MODE.values():
        if mapping.get("id") == mapping_id:
            return mapping
    return None


def get_alias_map(mode: Union[str, EntityMode]) -> Dict[str, List[str]]:
    """
    Group the alias entries of a mode by canonical field.

    Args:
        mode: Entity mode (or its string form)

    Returns:
        Dictionary of canonical field -> sanitized alias tokens, with every
        canonical field of the mode present (possibly with an empty list)
    """
    mode = EntityMode.parse(mode)
    alias_map = {field: [] for field in mode.fields}
    for entry in MAPPINGS_BY_MODE[mode]["mappings"]:
        token = sanitize_key(entry["source_field"])
        aliases = alias_map.setdefault(entry["target_field"], [])
        if token and token not in aliases:
            aliases.append(token)
    return alias_map


def score_header_aliases(header: Any, mode: Union[str, EntityMode]) -> Dict[str, int]:
    """
    Score a raw header against every canonical field's aliases.

    A field scores ALIAS_HEADER_BONUS when the sanitized header contains one
    of its sanitized alias tokens, otherwise 0.

    Args:
        header: Raw header key
        mode: Entity mode

    Returns:
        Dictionary of canonical field -> alias score
    """
    clean_header = sanitize_key(header)
    scores = {}
    for field, aliases in get_alias_map(mode).items():
        matched = bool(clean_header) and any(alias in clean_header for alias in aliases)
        scores[field] = ALIAS_HEADER_BONUS if matched else 0
    return scores


__all__ = [
    "VEHICLES_MAPPINGS",
    "DRIVERS_MAPPINGS",
    "MAPPINGS_BY_MODE",
    "sanitize_key",
    "get_mapping_by_id",
    "get_alias_map",
    "score_header_aliases",
]

"""
Field transforms for bulk-upload normalization.

Each canonical field has a pure string -> string transform. Every transform
accepts any raw cell value (including None and numbers) and is idempotent on
its own output.
"""

import re
from typing import Any, Callable, Dict, Iterable

WHITESPACE_PATTERN = re.compile(r"\s+")
NON_ALPHANUMERIC_PATTERN = re.compile(r"[^A-Z0-9]")

DEFAULT_ROLE = "Employee"

# Canonical spellings for roles the console knows, keyed by lowercase form.
# Anything else is capitalized.
KNOWN_ROLES = {
    "employee": "Employee",
    "driver": "Driver",
    "manager": "Manager",
    "mgr": "Manager",
    "management": "Manager",
    "admin": "Admin",
    "super admin": "Super Admin",
}


def to_safe_string(value: Any) -> str:
    """
    Convert a raw cell value to a trimmed string.

    Args:
        value: Cell value (string, int, float, None, ...)

    Returns:
        Empty string for None, otherwise the trimmed text. Integral floats
        lose their trailing ".0" so 1234.0 from a spreadsheet reads "1234".
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_whitespace(value: Any) -> str:
    """Collapse whitespace runs to one space and trim."""
    return WHITESPACE_PATTERN.sub(" ", to_safe_string(value)).strip()


def standardize_registration(value: Any) -> str:
    """Uppercase and keep only A-Z/0-9, e.g. "ka 01-ab 1234" -> "KA01AB1234"."""
    return NON_ALPHANUMERIC_PATTERN.sub("", normalize_whitespace(value).upper())


def standardize_chassis(value: Any) -> str:
    """Uppercase and keep only A-Z/0-9."""
    return NON_ALPHANUMERIC_PATTERN.sub("", normalize_whitespace(value).upper())


def standardize_name(value: Any) -> str:
    """
    Title-case a person's name word by word.

    "  aLEX   carter " -> "Alex Carter"
    """
    cleaned = normalize_whitespace(value).lower()
    if not cleaned:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in cleaned.split(" "))


def sanitize_role(value: Any) -> str:
    """
    Normalize a role, defaulting to "Employee" when blank.

    Known roles keep their canonical spelling ("super admin" -> "Super Admin");
    other values get the first letter uppercased and the rest lowercased.
    """
    cleaned = normalize_whitespace(value)
    if not cleaned:
        return DEFAULT_ROLE
    known = KNOWN_ROLES.get(cleaned.lower())
    if known:
        return known
    return cleaned[0].upper() + cleaned[1:].lower()


FIELD_TRANSFORMS: Dict[str, Callable[[Any], str]] = {
    "registration_no": standardize_registration,
    "vehicle_registration_no": standardize_registration,
    "chassis_number": standardize_chassis,
    "vehicle_type": normalize_whitespace,
    "name": standardize_name,
    "role": sanitize_role,
}


def apply_field_transform(field_name: str, value: Any) -> str:
    """
    Normalize ``value`` with the transform registered for ``field_name``.

    Raises:
        KeyError: If the field has no transform
    """
    return FIELD_TRANSFORMS[field_name](value)


def build_extra_fields(row: Dict[str, Any], used_keys: Iterable[str]) -> Dict[str, str]:
    """
    Collect raw columns the mapping did not consume.

    Args:
        row: Raw row
        used_keys: Raw header keys assigned to canonical fields

    Returns:
        Ordered dict of key -> trimmed value, skipping blank values
    """
    used = set(used_keys)
    extra = {}
    for key, value in (row or {}).items():
        if not key or key in used:
            continue
        cleaned = to_safe_string(value)
        if cleaned:
            extra[key] = cleaned
    return extra

"""
Data model and row validation for bulk uploads.

Defines the entity modes, the per-column statistics built while profiling,
the normalized row types and the business-rule validators that run on them.
"""

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class NormalizationError(ValueError):
    """Raised when normalization is asked for something it cannot handle."""
    pass


class EntityMode(Enum):
    """Record types accepted by the bulk uploader."""
    VEHICLE = "vehicle"
    DRIVER = "driver"

    @classmethod
    def parse(cls, value: Union[str, "EntityMode"]) -> "EntityMode":
        """
        Resolve a mode from its enum value or the console's spelling.

        Accepts "vehicle"/"vehicles" and "driver"/"drivers" in any case.

        Raises:
            NormalizationError: If the value names no known mode
        """
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text.endswith("s"):
            text = text[:-1]
        try:
            return cls(text)
        except ValueError:
            raise NormalizationError(f"Unknown entity mode: {value!r}")

    @property
    def fields(self) -> Tuple[str, ...]:
        """Canonical fields in mapping priority order."""
        return MAPPING_PRIORITY[self]

    @property
    def dedupe_key(self) -> str:
        return DEDUPE_KEYS[self]


# Mapping priority: a field earlier in the tuple claims its column first
MAPPING_PRIORITY = {
    EntityMode.VEHICLE: ("registration_no", "chassis_number", "vehicle_type"),
    EntityMode.DRIVER: ("name", "vehicle_registration_no", "role"),
}

DEDUPE_KEYS = {
    EntityMode.VEHICLE: "registration_no",
    EntityMode.DRIVER: "name",
}

# canonical field -> raw header key
ColumnMapping = Dict[str, str]


@dataclass(frozen=True)
class ColumnStats:
    """
    Profile of one raw spreadsheet column.

    Attributes:
        key: Raw header key as it appears in the rows
        index: Position of the column in header order (0-indexed)
        total: Number of rows with a non-blank value in this column
        pattern_matches: Non-blank values matching each shape predicate
        alias_score: Header alias bonus per canonical field
    """
    key: str
    index: int
    total: int = 0
    pattern_matches: Dict[str, int] = field(default_factory=dict)
    alias_score: Dict[str, int] = field(default_factory=dict)

    def match_rate(self, pattern: Optional[str]) -> float:
        """Percentage (0-100) of non-blank values matching ``pattern``."""
        if not pattern or self.total <= 0:
            return 0.0
        return self.pattern_matches.get(pattern, 0) / self.total * 100


@dataclass(frozen=True)
class VehicleRow:
    """A normalized vehicle record."""
    mode: ClassVar[EntityMode] = EntityMode.VEHICLE

    registration_no: str = ""
    vehicle_type: str = ""
    chassis_number: str = ""
    extra: Dict[str, str] = field(default_factory=dict)
    source_index: Optional[int] = None

    @classmethod
    def canonical_fields(cls) -> Tuple[str, ...]:
        return ("registration_no", "vehicle_type", "chassis_number")

    def get(self, name: str, default: Any = None) -> Any:
        return getattr(self, name, default)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DriverRow:
    """A normalized driver/employee record."""
    mode: ClassVar[EntityMode] = EntityMode.DRIVER

    name: str = ""
    role: str = "Employee"
    vehicle_registration_no: str = ""
    extra: Dict[str, str] = field(default_factory=dict)
    source_index: Optional[int] = None

    @classmethod
    def canonical_fields(cls) -> Tuple[str, ...]:
        return ("name", "role", "vehicle_registration_no")

    def get(self, name: str, default: Any = None) -> Any:
        return getattr(self, name, default)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


NormalizedRow = Union[VehicleRow, DriverRow]

ROW_TYPES = {
    EntityMode.VEHICLE: VehicleRow,
    EntityMode.DRIVER: DriverRow,
}


# ============================================================================
# Validation
# ============================================================================

REGISTRATION_REGEX = re.compile(r"^[A-Z0-9]{5,}$")
CHASSIS_REGEX = re.compile(r"^[A-Z0-9]{6,}$")

SUPER_ADMIN_ROLE = "Super Admin"

REGISTRATION_ISSUE = "Registration number must be at least 5 characters (A-Z/0-9)."
CHASSIS_ISSUE = "Chassis number must be at least 6 alphanumeric characters."
NAME_ISSUE = "Name must be at least 2 characters."
VEHICLE_REGISTRATION_ISSUE = "Vehicle registration number must be at least 5 alphanumeric characters."
SUPER_ADMIN_ISSUE = "Bulk upload cannot assign Super Admin role."


def validate_vehicle_row(row: VehicleRow) -> List[str]:
    """
    Check a normalized vehicle row against the upload rules.

    Args:
        row: Normalized vehicle row

    Returns:
        List of issue messages (empty if the row is valid)
    """
    issues = []
    if not row.registration_no or not REGISTRATION_REGEX.match(row.registration_no):
        issues.append(REGISTRATION_ISSUE)
    if row.chassis_number and not CHASSIS_REGEX.match(row.chassis_number):
        issues.append(CHASSIS_ISSUE)
    return issues


def validate_driver_row(row: DriverRow) -> List[str]:
    """
    Check a normalized driver row against the upload rules.

    The Super Admin check is independent of every other field.

    Args:
        row: Normalized driver row

    Returns:
        List of issue messages (empty if the row is valid)
    """
    issues = []
    if not row.name or len(row.name) < 2:
        issues.append(NAME_ISSUE)
    if row.vehicle_registration_no and not REGISTRATION_REGEX.match(row.vehicle_registration_no):
        issues.append(VEHICLE_REGISTRATION_ISSUE)
    if (row.role or "").strip().lower() == SUPER_ADMIN_ROLE.lower():
        issues.append(SUPER_ADMIN_ISSUE)
    return issues


def validate_row(row: NormalizedRow) -> List[str]:
    """Validate a row with the rules of its own entity mode."""
    if isinstance(row, DriverRow):
        return validate_driver_row(row)
    return validate_vehicle_row(row)

"""
Tests for entity modes, column statistics and row validation.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from schema import (
    CHASSIS_ISSUE,
    NAME_ISSUE,
    REGISTRATION_ISSUE,
    SUPER_ADMIN_ISSUE,
    VEHICLE_REGISTRATION_ISSUE,
    ColumnStats,
    DriverRow,
    EntityMode,
    NormalizationError,
    VehicleRow,
    validate_driver_row,
    validate_row,
    validate_vehicle_row,
)


def test_entity_mode_parse():
    assert EntityMode.parse("vehicle") is EntityMode.VEHICLE
    assert EntityMode.parse("Vehicles") is EntityMode.VEHICLE
    assert EntityMode.parse(" DRIVERS ") is EntityMode.DRIVER
    assert EntityMode.parse(EntityMode.DRIVER) is EntityMode.DRIVER


def test_entity_mode_parse_rejects_unknown_modes():
    with pytest.raises(NormalizationError):
        EntityMode.parse("trips")
    with pytest.raises(ValueError):
        EntityMode.parse(None)


def test_entity_mode_fields_and_dedupe_keys():
    assert EntityMode.VEHICLE.fields == ("registration_no", "chassis_number", "vehicle_type")
    assert EntityMode.DRIVER.fields == ("name", "vehicle_registration_no", "role")
    assert EntityMode.VEHICLE.dedupe_key == "registration_no"
    assert EntityMode.DRIVER.dedupe_key == "name"


def test_column_stats_match_rate():
    stats = ColumnStats(key="Reg", index=0, total=4, pattern_matches={"registration": 3})
    assert stats.match_rate("registration") == 75.0
    assert stats.match_rate("chassis") == 0.0
    assert stats.match_rate(None) == 0.0
    assert ColumnStats(key="Empty", index=1).match_rate("registration") == 0.0


def test_row_defaults():
    assert VehicleRow().to_dict() == {
        "registration_no": "",
        "vehicle_type": "",
        "chassis_number": "",
        "extra": {},
        "source_index": None,
    }
    assert DriverRow().role == "Employee"
    assert DriverRow.canonical_fields() == ("name", "role", "vehicle_registration_no")


VEHICLE_CASES = [
    (VehicleRow(registration_no="KA01AB1234"), []),
    (VehicleRow(registration_no="KA01AB1234", chassis_number="JHMCM56557C400123"), []),
    (VehicleRow(), [REGISTRATION_ISSUE]),
    (VehicleRow(registration_no="AB12"), [REGISTRATION_ISSUE]),
    (VehicleRow(registration_no="KA01AB1234", chassis_number="ABC12"), [CHASSIS_ISSUE]),
    (VehicleRow(registration_no="KA-01", chassis_number="X1"), [REGISTRATION_ISSUE, CHASSIS_ISSUE]),
]


@pytest.mark.parametrize("row, expected", VEHICLE_CASES)
def test_validate_vehicle_row(row, expected):
    assert validate_vehicle_row(row) == expected


DRIVER_CASES = [
    (DriverRow(name="Alex Carter"), []),
    (DriverRow(name="Alex Carter", vehicle_registration_no="KA01AB1234"), []),
    (DriverRow(name="A"), [NAME_ISSUE]),
    (DriverRow(name="Alex Carter", vehicle_registration_no="AB1"), [VEHICLE_REGISTRATION_ISSUE]),
    (DriverRow(name="Alex Carter", role="Super Admin"), [SUPER_ADMIN_ISSUE]),
    (DriverRow(name="", role="Super Admin"), [NAME_ISSUE, SUPER_ADMIN_ISSUE]),
]


@pytest.mark.parametrize("row, expected", DRIVER_CASES)
def test_validate_driver_row(row, expected):
    assert validate_driver_row(row) == expected


def test_super_admin_is_always_flagged():
    row = DriverRow(name="Priya Nair", role="super admin", vehicle_registration_no="KA01AB1234")
    assert validate_driver_row(row) == [SUPER_ADMIN_ISSUE]


def test_validate_row_dispatches_on_row_type():
    assert validate_row(VehicleRow()) == [REGISTRATION_ISSUE]
    assert validate_row(DriverRow()) == [NAME_ISSUE]

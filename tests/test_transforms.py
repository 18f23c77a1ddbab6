"""
Tests for the per-field transforms.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from transforms import (
    apply_field_transform,
    build_extra_fields,
    normalize_whitespace,
    sanitize_role,
    standardize_chassis,
    standardize_name,
    standardize_registration,
    to_safe_string,
)


def test_to_safe_string():
    assert to_safe_string(None) == ""
    assert to_safe_string("  KA01  ") == "KA01"
    assert to_safe_string(1234.0) == "1234"
    assert to_safe_string(12.5) == "12.5"
    assert to_safe_string(0) == "0"


def test_standardize_registration_strips_separators():
    assert standardize_registration("ka 01-ab 1234") == "KA01AB1234"
    assert standardize_registration("KA.01.AB.1234") == "KA01AB1234"
    assert standardize_registration(None) == ""
    assert standardize_registration("---") == ""


def test_standardize_chassis():
    assert standardize_chassis(" jhmcm56557c400123 ") == "JHMCM56557C400123"
    assert standardize_chassis("MA3-EWDE 1S00") == "MA3EWDE1S00"


def test_standardize_name():
    assert standardize_name("  aLEX   carter ") == "Alex Carter"
    assert standardize_name("PRIYA") == "Priya"
    assert standardize_name("") == ""


ROLE_CASES = [
    ("", "Employee"),
    (None, "Employee"),
    ("  driver ", "Driver"),
    ("MGR", "Manager"),
    ("management", "Manager"),
    ("super   admin", "Super Admin"),
    ("SUPER ADMIN", "Super Admin"),
    ("FLEET supervisor", "Fleet supervisor"),
]


@pytest.mark.parametrize("value, expected", ROLE_CASES)
def test_sanitize_role(value, expected):
    assert sanitize_role(value) == expected


def test_free_text_keeps_case():
    assert normalize_whitespace("  Mini   Van ") == "Mini Van"
    assert normalize_whitespace("TRUCK\t 16T") == "TRUCK 16T"


IDEMPOTENCE_CASES = [
    (standardize_registration, "ka 01-ab 1234"),
    (standardize_chassis, "jhmcm-56557c400123"),
    (standardize_name, "mary  o'neil SMITH"),
    (sanitize_role, "super admin"),
    (sanitize_role, "fleet SUPERVISOR"),
    (sanitize_role, ""),
    (normalize_whitespace, " Mini   Van "),
]


@pytest.mark.parametrize("transform, value", IDEMPOTENCE_CASES)
def test_transforms_are_idempotent(transform, value):
    once = transform(value)
    assert transform(once) == once


def test_apply_field_transform():
    assert apply_field_transform("vehicle_registration_no", "ka01 ab1234") == "KA01AB1234"
    assert apply_field_transform("role", "") == "Employee"
    with pytest.raises(KeyError):
        apply_field_transform("mileage", "12")


def test_build_extra_fields_skips_used_and_blank_values():
    row = {"Reg": "KA01AB1234", "Owner": " Ravi ", "Notes": "", "Color": None, "Seats": 4.0}
    extra = build_extra_fields(row, ["Reg"])
    assert extra == {"Owner": "Ravi", "Seats": "4"}
    assert list(extra) == ["Owner", "Seats"]

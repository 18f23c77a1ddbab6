"""
Tests for column mapping: alias priority, content inference, tie-breaking
and the one-field-per-column rule.
"""

import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from config import ALIAS_HEADER_BONUS
from column_mapper import detect_column_mappings, score_column
from schema import ColumnStats


def test_score_column_combines_alias_and_match_rate():
    stats = ColumnStats(
        key="Reg",
        index=0,
        total=4,
        pattern_matches={"registration": 3, "chassis": 1},
        alias_score={"registration_no": ALIAS_HEADER_BONUS},
    )
    assert score_column(stats, "registration_no") == ALIAS_HEADER_BONUS + 75.0
    # 25% chassis matches is under the threshold
    assert score_column(stats, "chassis_number") == 0.0


def test_score_column_ignores_empty_columns():
    stats = ColumnStats(key="Reg", index=0, total=0, alias_score={"registration_no": ALIAS_HEADER_BONUS})
    assert score_column(stats, "registration_no") == 0.0


def test_header_alias_outranks_content():
    rows = [{"junk1": "KA01AB1234", "Vehicle No": "KA01AB1234"}]
    mapping = detect_column_mappings(rows, "vehicle")
    assert mapping["registration_no"] == "Vehicle No"


def test_content_only_inference():
    rows = [
        {"col_a": "KA01AB1234", "col_b": "hello"},
        {"col_a": "KA02CD5678", "col_b": "world"},
        {"col_a": "", "col_b": "again"},
    ]
    mapping = detect_column_mappings(rows, "vehicle")
    assert mapping == {"registration_no": "col_a"}


def test_match_rate_must_exceed_threshold():
    rows = [{"col_a": "KA01AB1234"}, {"col_a": "hello"}]
    assert detect_column_mappings(rows, "vehicle") == {}


def test_ties_go_to_the_leftmost_column():
    rows = [
        {"first": "KA01AB1234", "second": "KA09ZZ0001"},
        {"first": "KA02CD5678", "second": "KA09ZZ0002"},
    ]
    mapping = detect_column_mappings(rows, "vehicle")
    assert mapping["registration_no"] == "first"

    mapping = detect_column_mappings(rows, "vehicle", headers=["second", "first"])
    assert mapping["registration_no"] == "second"


def test_a_column_is_never_assigned_twice():
    rows = [{"Registration or Chassis": "KA01AB1234"}]
    mapping = detect_column_mappings(rows, "vehicle")
    assert mapping == {"registration_no": "Registration or Chassis"}
    assert len(set(mapping.values())) == len(mapping)


def test_mapping_is_deterministic():
    rows = [
        {"A": "KA01AB1234", "B": "JHMCM56557C400123", "C": "Truck", "D": "KA01AB9999"},
        {"A": "KA02CD5678", "B": "JHMCM56557C400999", "C": "Van", "D": "KA01AB8888"},
    ]
    first = detect_column_mappings(rows, "vehicle")
    second = detect_column_mappings(rows, "vehicle")
    assert first == second
    assert first == {"registration_no": "A", "chassis_number": "B", "vehicle_type": "C"}


def test_empty_column_with_alias_is_not_selected():
    rows = [{"Registration": "", "x": "KA01AB1234"}]
    mapping = detect_column_mappings(rows, "vehicle")
    assert mapping["registration_no"] == "x"


def test_driver_mapping():
    rows = [
        {"Employee Name": "alex carter", "Designation": "driver", "Vehicle": "KA01AB1234"},
        {"Employee Name": "priya nair", "Designation": "manager", "Vehicle": ""},
    ]
    mapping = detect_column_mappings(rows, "drivers")
    assert mapping == {
        "name": "Employee Name",
        "vehicle_registration_no": "Vehicle",
        "role": "Designation",
    }


def test_no_rows_no_mapping():
    assert detect_column_mappings([], "vehicle") == {}

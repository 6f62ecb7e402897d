from __future__ import annotations

import math

import pytest

from csv_profiler.models import ColumnType
from csv_profiler.profile.types import column_info, detect_column_type, parse_float


def test_empty_and_all_missing_columns_are_unknown() -> None:
    assert detect_column_type([]) == ColumnType.UNKNOWN
    assert detect_column_type(["", None, ""]) == ColumnType.UNKNOWN


def test_boolean_needs_at_most_two_distinct_values() -> None:
    assert detect_column_type(["true", "FALSE", "True", ""]) == ColumnType.BOOLEAN
    assert detect_column_type(["Yes", "no"]) == ColumnType.BOOLEAN
    # A single non-boolean partner still counts: {"yes", "maybe"}.
    assert detect_column_type(["yes", "maybe"]) == ColumnType.BOOLEAN


def test_three_distinct_boolean_tokens_are_not_boolean() -> None:
    # {"true", "false", "yes"} has 3 members, so the <= 2 rule rejects it.
    result = detect_column_type(["true", "false", "true", "yes"])
    assert result != ColumnType.BOOLEAN
    assert result == ColumnType.CATEGORICAL


def test_two_values_without_boolean_token_are_not_boolean() -> None:
    assert detect_column_type(["0", "1", "1"]) == ColumnType.NUMERIC


def test_date_patterns_are_prefix_and_syntax_only() -> None:
    assert detect_column_type(["2024-01-03", "2024-13-45T10:00"]) == ColumnType.DATE
    assert detect_column_type(["1/2/24", "12/31/2024", ""]) == ColumnType.DATE
    # One non-matching value is enough to fall through.
    assert detect_column_type(["2024-01-03", "Jan 4"]) == ColumnType.CATEGORICAL


def test_date_checked_before_numeric() -> None:
    # "2024-01-03" parses as 2024 numerically, but every value is date-shaped.
    assert detect_column_type(["2024-01-03", "2024-01-04"]) == ColumnType.DATE


def test_numeric_ratio_must_exceed_threshold() -> None:
    # 4 of 5 parse: exactly 0.8 is not enough.
    assert detect_column_type(["1", "2", "3", "4", "x"]) == ColumnType.CATEGORICAL
    # 5 of 6 parse: 0.833 > 0.8.
    assert detect_column_type(["1", "2", "3", "4", "5", "x"]) == ColumnType.NUMERIC


def test_numeric_threshold_is_configurable() -> None:
    values = ["1", "2", "x", "y"]
    assert detect_column_type(values) == ColumnType.CATEGORICAL
    assert detect_column_type(values, numeric_ratio_threshold=0.4) == ColumnType.NUMERIC


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("12", 12.0),
        ("12.5kg", 12.5),
        ("  -3e2", -300.0),
        (".5", 0.5),
        ("1e", 1.0),
        ("+7.", 7.0),
        ("abc", None),
        ("", None),
        (None, None),
        ("-", None),
    ],
)
def test_parse_float_reads_leading_numeric_prefix(raw, expected) -> None:
    assert parse_float(raw) == expected


def test_parse_float_infinity() -> None:
    assert math.isinf(parse_float("Infinity") or 0.0)
    assert parse_float("-Infinity") == -math.inf


def test_detection_is_idempotent() -> None:
    values = ["3", "x", "4.5", "", "2024-01-01", "7", "8", "9", "10", "11"]
    first = detect_column_type(values)
    assert all(detect_column_type(values) == first for _ in range(5))
    assert detect_column_type(list(values)) == first


def test_column_info_counts_distinct_non_empty_values() -> None:
    info = column_info("region", ["West", "West", "", "East", None, "west"])
    assert info.name == "region"
    assert info.type == ColumnType.CATEGORICAL
    assert info.unique_values == 3


def test_unique_count_is_independent_of_type() -> None:
    info = column_info("flag", ["yes", "no", "yes", "no"])
    assert info.type == ColumnType.BOOLEAN
    assert info.unique_values == 2

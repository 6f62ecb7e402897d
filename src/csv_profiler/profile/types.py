from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from ..models import ColumnInfo, ColumnType


_BOOLEAN_TOKENS = frozenset({"true", "false", "yes", "no"})

# ISO-like "YYYY-MM-DD..." or "M/D/YY(YY)..."; prefix match, no calendar check.
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}", re.ASCII)

# Longest leading decimal literal, the way JavaScript's parseFloat reads it.
_FLOAT_PREFIX_RE = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.ASCII,
)


def is_missing(value: Optional[str]) -> bool:
    return value is None or value == ""


def non_empty(values: Iterable[Optional[str]]) -> list[str]:
    return [str(v) for v in values if not is_missing(v)]


def parse_float(value: Optional[str]) -> Optional[float]:
    """
    Parse the leading numeric prefix of a raw cell.

    "12.5kg" -> 12.5, " -3e2" -> -300.0, "Infinity" -> inf, "abc" -> None.
    Non-finite results are returned as-is; callers filter them when needed.
    """
    if value is None:
        return None
    m = _FLOAT_PREFIX_RE.match(str(value).lstrip())
    if m is None:
        return None
    return float(m.group(0))


def detect_column_type(values: Sequence[Optional[str]], *, numeric_ratio_threshold: float = 0.8) -> ColumnType:
    """
    Classify a column from its raw values.

    Checks run in a fixed order on the non-empty values: boolean, date,
    numeric, then categorical. A column with no non-empty value is unknown.
    """
    present = non_empty(values)
    if not present:
        return ColumnType.UNKNOWN

    lowered = {v.lower() for v in present}
    if len(lowered) <= 2 and lowered & _BOOLEAN_TOKENS:
        return ColumnType.BOOLEAN

    if all(_DATE_RE.match(v) for v in present):
        return ColumnType.DATE

    parsed = sum(1 for v in present if parse_float(v) is not None)
    if parsed / len(present) > numeric_ratio_threshold:
        return ColumnType.NUMERIC

    return ColumnType.CATEGORICAL


def count_unique(values: Sequence[Optional[str]]) -> int:
    return len(set(non_empty(values)))


def column_info(name: str, values: Sequence[Optional[str]], *, numeric_ratio_threshold: float = 0.8) -> ColumnInfo:
    return ColumnInfo(
        name=name,
        type=detect_column_type(values, numeric_ratio_threshold=numeric_ratio_threshold),
        unique_values=count_unique(values),
    )

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .types import is_missing

NULL_BUCKET = "null"


def distribution(rows: Sequence[Mapping[str, Any]], column: str) -> dict[str, int]:
    """
    Frequency table of one column's raw values.

    Missing or absent values are counted under "null". Keys keep the order in
    which each value first appears; no ranking is applied here.
    """
    counts: dict[str, int] = {}
    for row in rows:
        value = row.get(column)
        key = NULL_BUCKET if is_missing(value) else str(value)
        counts[key] = counts.get(key, 0) + 1
    return counts


def top_categories(dist: Mapping[str, int], n: int = 8) -> list[tuple[str, int]]:
    """Most frequent buckets first; ties keep first-occurrence order."""
    ranked = sorted(enumerate(dist.items()), key=lambda x: (-x[1][1], x[0]))
    return [item for _, item in ranked[:n]]

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from ..models import Missingness
from .types import is_missing


def missingness(rows: Sequence[Mapping[str, Any]]) -> Missingness:
    """
    Count missing cells (None or "") across the dataset.

    The cell total is len(rows) * width of the first row. Rows are expected to
    be rectangular; the ingestion step normalises them to the header width.
    """
    if not rows:
        return Missingness(count=0, percentage=0.0)

    total_cells = len(rows) * len(rows[0])
    missing = 0
    for row in rows:
        for value in row.values():
            if is_missing(value):
                missing += 1

    pct = (missing / total_cells) * 100 if total_cells > 0 else 0.0
    return Missingness(count=missing, percentage=pct)


def canonical_row(row: Mapping[str, Any]) -> str:
    # Key order is the row's insertion order (header order); values keep their type.
    return json.dumps(dict(row), ensure_ascii=False, separators=(",", ":"))


def duplicate_percentage(rows: Sequence[Mapping[str, Any]]) -> float:
    """Share of rows, in percent, that exactly repeat an earlier row."""
    n = len(rows)
    if n < 2:
        return 0.0
    distinct = len({canonical_row(r) for r in rows})
    return ((n - distinct) / n) * 100

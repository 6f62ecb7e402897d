from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .errors import EmptyDatasetError, IngestionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanOutcome:
    """Result of the cleaning step."""

    out_path: Path
    rows_in: int
    rows_out: int
    empty_rows_dropped: int
    duplicates_dropped: int


def clean_csv(source_path: Path, out_path: Path) -> CleanOutcome:
    """
    Write a copy of the CSV without fully-empty rows and exact duplicate rows.

    Rules:
    - A row is empty when every field is "".
    - Duplicates are exact matches on every field; the first occurrence is kept.
    - Values are kept verbatim as strings (no type coercion, no NA parsing).
    """
    try:
        df = pd.read_csv(
            source_path,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as exc:
        raise EmptyDatasetError(f"'{source_path.name}' is empty.") from exc
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise IngestionError(f"Unable to read CSV source: {type(exc).__name__}: {exc}") from exc

    # Short records come back as NaN even with NA parsing disabled.
    df = df.fillna("")
    rows_in = int(df.shape[0])

    empty_mask = (df == "").all(axis=1)
    df = df[~empty_mask]
    empty_dropped = int(empty_mask.sum())

    before_dedup = int(df.shape[0])
    df = df.drop_duplicates(keep="first")
    duplicates_dropped = before_dedup - int(df.shape[0])

    if df.empty:
        raise EmptyDatasetError(f"'{source_path.name}' is completely empty after cleaning.")

    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    logger.info(
        "Cleaned %s: %d -> %d rows (%d empty, %d duplicate)",
        source_path.name,
        rows_in,
        int(df.shape[0]),
        empty_dropped,
        duplicates_dropped,
    )
    return CleanOutcome(
        out_path=out_path,
        rows_in=rows_in,
        rows_out=int(df.shape[0]),
        empty_rows_dropped=empty_dropped,
        duplicates_dropped=duplicates_dropped,
    )

from __future__ import annotations

import csv
import io
import logging
import math
import os
import warnings
from concurrent import futures
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterator, Optional, Sequence, Union

from .config import ProfilerConfig, RaggedRowPolicy
from .errors import DatasetTooLargeError, DegenerateColumnWarning, EmptyDatasetError, IngestionError
from .models import ColumnInfo, ColumnType, NumericStats, Profile, Row
from .profile.distribution import distribution
from .profile.numeric import count_outliers, summarize
from .profile.quality import duplicate_percentage, missingness
from .profile.types import column_info, parse_float
from .utils import round_half_up as _round

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, bytes, bytearray, IO[bytes], IO[str]]


@dataclass
class Table:
    """Buffered contents of one source: rows (row-major) and columns (column-major)."""

    header: list[str]
    rows: list[Row] = field(default_factory=list)
    columns: dict[str, list[str]] = field(default_factory=dict)
    size_bytes: int = 0
    ragged_lines: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class _ColumnResult:
    info: ColumnInfo
    stats: Optional[NumericStats] = None
    outliers: int = 0
    numeric_values: Optional[list[float]] = None
    categorical_values: Optional[list[str]] = None
    distribution: Optional[dict[str, int]] = None
    degenerate: bool = False


def analyze(
    source: Source,
    file_name: str,
    file_size_bytes: Optional[int] = None,
    *,
    config: Optional[ProfilerConfig] = None,
) -> Profile:
    """
    Profile one delimited file.

    The source is read once, in order. Per-column work then runs inline or on a
    thread pool (config.max_workers > 1); both give the same Profile.

    Raises:
      IngestionError: unreadable, undecodable or malformed source
      DatasetTooLargeError: source above config.max_file_bytes
      EmptyDatasetError: no data rows after the header
    """
    cfg = config or ProfilerConfig()

    if file_size_bytes is not None and file_size_bytes > cfg.max_file_bytes:
        raise DatasetTooLargeError(file_size_bytes, cfg.max_file_bytes)

    table = load_table(source, config=cfg)
    if not table.rows:
        raise EmptyDatasetError(f"'{file_name}' has no data rows.")

    results = _profile_columns(table, cfg)
    columns = [r.info for r in results]
    for r in results:
        if r.degenerate:
            logger.warning("Numeric column %s has no finite values", r.info.name)
            warnings.warn(
                f"Column '{r.info.name}' is numeric but has no finite values; statistics are zero.",
                DegenerateColumnWarning,
                stacklevel=2,
            )

    miss = missingness(table.rows)
    dup_pct = duplicate_percentage(table.rows)
    missing_pct = _round(miss.percentage)

    stats: dict[str, NumericStats] = {}
    numeric_data: dict[str, list[float]] = {}
    categorical_data: dict[str, list[str]] = {}
    column_distribution: dict[str, dict[str, int]] = {}
    outlier_total = 0
    for r in results:
        name = r.info.name
        if r.stats is not None:
            stats[name] = r.stats
            numeric_data[name] = r.numeric_values or []
            outlier_total += r.outliers
        if r.distribution is not None:
            column_distribution[name] = r.distribution
            categorical_data[name] = r.categorical_values or []

    profile = Profile(
        file_name=file_name,
        file_size=file_size_bytes if file_size_bytes is not None else table.size_bytes,
        total_rows=len(table.rows),
        total_columns=len(columns),
        columns=columns,
        missing_count=miss.count,
        missing_percentage=missing_pct,
        duplicate_rows_percentage=_round(dup_pct),
        completeness_score=_round(100 - missing_pct),
        numeric_columns=sum(1 for c in columns if c.type == ColumnType.NUMERIC),
        categorical_columns=sum(1 for c in columns if c.type == ColumnType.CATEGORICAL),
        outlier_count=outlier_total,
        stats=stats,
        preview=[dict(row) for row in table.rows[: cfg.preview_rows]],
        column_distribution=column_distribution,
        numeric_data=numeric_data,
        categorical_data=categorical_data,
    )
    logger.info(
        "Profiled %s: %d rows x %d columns (%d numeric, %d categorical, %d outliers)",
        file_name,
        profile.total_rows,
        profile.total_columns,
        profile.numeric_columns,
        profile.categorical_columns,
        profile.outlier_count,
    )
    return profile


def load_table(source: Source, *, config: Optional[ProfilerConfig] = None) -> Table:
    """Read the whole source into a Table, or raise IngestionError."""
    cfg = config or ProfilerConfig()
    try:
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            size = path.stat().st_size
            if size > cfg.max_file_bytes:
                raise DatasetTooLargeError(size, cfg.max_file_bytes)
            with path.open("r", encoding="utf-8-sig", newline="") as f:
                table = read_rows(f, ragged_rows=cfg.ragged_rows)
        else:
            raw = _read_limited(source, cfg.max_file_bytes)
            size = len(raw)
            stream = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8-sig", newline="")
            table = read_rows(stream, ragged_rows=cfg.ragged_rows)
    except IngestionError:
        raise
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise IngestionError(f"Unable to read CSV source: {type(exc).__name__}: {exc}") from exc

    table.size_bytes = size
    if table.ragged_lines:
        logger.warning(
            "%d row(s) did not match the header width of %d and were padded/truncated (first at line %d)",
            len(table.ragged_lines),
            len(table.header),
            table.ragged_lines[0],
        )
    return table


def read_rows(stream: IO[str], *, ragged_rows: RaggedRowPolicy = "pad") -> Table:
    """
    Tokenise a text stream with the standard csv reader.

    The first non-blank record is the header and fixes column order and width.
    Blank lines are skipped everywhere. Records of a different width are
    padded with "" or truncated ("pad"), or rejected with IngestionError
    ("reject").
    """
    reader = csv.reader(stream)
    header = next(_records(reader), None)
    if header is None:
        return Table(header=[])

    dupes = sorted({h for h in header if header.count(h) > 1})
    if dupes:
        raise IngestionError(f"Duplicate column name(s) in header: {', '.join(dupes)}")

    width = len(header)
    table = Table(header=list(header), columns={name: [] for name in header})
    for record in _records(reader):
        if len(record) != width:
            if ragged_rows == "reject":
                raise IngestionError(
                    f"Line {reader.line_num}: expected {width} fields, found {len(record)}."
                )
            table.ragged_lines.append(reader.line_num)
            record = (record + [""] * width)[:width]

        row = dict(zip(header, record))
        table.rows.append(row)
        for name, value in row.items():
            table.columns[name].append(value)
    return table


def _records(reader: Iterator[list[str]]) -> Iterator[list[str]]:
    for record in reader:
        if not record:
            continue
        yield record


def _read_limited(source: Union[bytes, bytearray, IO[bytes], IO[str]], limit: int) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    else:
        chunk = source.read(limit + 1)
        raw = chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)
    if len(raw) > limit:
        raise DatasetTooLargeError(len(raw), limit)
    return raw


def _profile_columns(table: Table, cfg: ProfilerConfig) -> list[_ColumnResult]:
    names = table.header
    slots: list[Optional[_ColumnResult]] = [None] * len(names)

    if cfg.max_workers <= 1 or len(names) < 2:
        for i, name in enumerate(names):
            slots[i] = _profile_column(name, table.columns[name], table.rows, cfg)
    else:
        with futures.ThreadPoolExecutor(max_workers=min(cfg.max_workers, len(names))) as pool:
            pending = {
                pool.submit(_profile_column, name, table.columns[name], table.rows, cfg): i
                for i, name in enumerate(names)
            }
            for fut in futures.as_completed(pending):
                slots[pending[fut]] = fut.result()

    return [s for s in slots if s is not None]


def _profile_column(name: str, values: Sequence[str], rows: Sequence[Row], cfg: ProfilerConfig) -> _ColumnResult:
    info = column_info(name, values, numeric_ratio_threshold=cfg.numeric_ratio_threshold)

    if info.type == ColumnType.NUMERIC:
        parsed = [f for f in (parse_float(v) for v in values) if f is not None and math.isfinite(f)]
        return _ColumnResult(
            info=info,
            degenerate=not parsed,
            stats=summarize(parsed),
            outliers=count_outliers(parsed, multiplier=cfg.outlier_iqr_multiplier),
            numeric_values=parsed,
        )

    if info.type == ColumnType.CATEGORICAL:
        return _ColumnResult(
            info=info,
            categorical_values=[str(v) for v in values],
            distribution=distribution(rows, name),
        )

    return _ColumnResult(info=info)

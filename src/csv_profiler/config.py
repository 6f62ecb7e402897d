from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Literal

RaggedRowPolicy = Literal["pad", "reject"]

DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024


@dataclass(frozen=True)
class ProfilerConfig:
    """Stateless knobs for a profiling run.

    max_file_bytes bounds the in-memory buffers (rows are held twice, row-major
    and column-major). ragged_rows decides what happens to records whose field
    count differs from the header: "pad" fills short rows with "" and drops
    surplus fields, "reject" fails the ingestion.
    """

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    preview_rows: int = 10
    numeric_ratio_threshold: float = 0.8
    outlier_iqr_multiplier: float = 1.5
    max_workers: int = 1
    ragged_rows: RaggedRowPolicy = "pad"
    retention_days: int = 30

    def __post_init__(self) -> None:
        if self.ragged_rows not in ("pad", "reject"):
            raise ValueError(f"ragged_rows must be 'pad' or 'reject', got {self.ragged_rows!r}")
        if self.max_file_bytes <= 0:
            raise ValueError("max_file_bytes must be positive")
        if self.preview_rows < 0:
            raise ValueError("preview_rows must be >= 0")

    @classmethod
    def from_env(cls) -> "ProfilerConfig":
        base = cls()
        ragged = os.environ.get("CSV_PROFILER_RAGGED_ROWS", "").strip().lower()
        return replace(
            base,
            max_file_bytes=_env_int("CSV_PROFILER_MAX_FILE_BYTES", base.max_file_bytes),
            preview_rows=_env_int("CSV_PROFILER_PREVIEW_ROWS", base.preview_rows, minimum=0),
            max_workers=_env_int("CSV_PROFILER_MAX_WORKERS", base.max_workers),
            retention_days=_env_int("CSV_PROFILER_RETENTION_DAYS", base.retention_days),
            ragged_rows=ragged if ragged in ("pad", "reject") else base.ragged_rows,  # type: ignore[arg-type]
        )


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = int(raw)
        return v if v >= minimum else default
    except ValueError:
        return default

"""Per-column and per-dataset profiling primitives.

Everything here is pure computation over already-buffered values; reading the
source is the job of csv_profiler.ingest.
"""

from .distribution import distribution, top_categories
from .numeric import count_outliers, quartiles, summarize
from .quality import duplicate_percentage, missingness
from .types import column_info, detect_column_type, parse_float

__all__ = [
    "column_info",
    "count_outliers",
    "detect_column_type",
    "distribution",
    "duplicate_percentage",
    "missingness",
    "parse_float",
    "quartiles",
    "summarize",
    "top_categories",
]

"""Statistical profiling of delimited tabular files.

    from csv_profiler import analyze
    profile = analyze("orders.csv", "orders.csv")
    profile.to_json()
"""

from .config import ProfilerConfig
from .errors import (
    DatasetTooLargeError,
    DegenerateColumnWarning,
    EmptyDatasetError,
    IngestionError,
    ProfilerError,
)
from .ingest import analyze
from .models import ColumnInfo, ColumnType, NumericStats, Profile

__all__ = [
    "ColumnInfo",
    "ColumnType",
    "DatasetTooLargeError",
    "DegenerateColumnWarning",
    "EmptyDatasetError",
    "IngestionError",
    "NumericStats",
    "Profile",
    "ProfilerConfig",
    "ProfilerError",
    "analyze",
]

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Row = dict[str, str]


class ColumnType(str, Enum):
    """
    Type tag assigned to a column by the type detector.

    Values are the lowercase strings consumed by the dashboard and the archive.
    """
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    DATE = "date"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


class _ProfileModel(BaseModel):
    """Frozen model serialised with camelCase keys (fileName, totalRows, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ColumnInfo(_ProfileModel):
    """
    One entry per source column, in header order.

    unique_values: number of distinct stringified non-empty values
    """
    name: str
    type: ColumnType
    unique_values: int = 0


class NumericStats(_ProfileModel):
    """Order statistics of a numeric column, rounded to 2 decimals."""

    mean: float = 0.0
    median: float = 0.0
    std: float = 0.0
    min: float = 0.0
    max: float = 0.0
    q1: float = 0.0
    q3: float = 0.0
    iqr: float = 0.0


class Missingness(_ProfileModel):
    count: int = 0
    percentage: float = 0.0


class Profile(_ProfileModel):
    """
    The complete statistical summary of one input file.

    This is the contract read by the archive, the report builder and any
    dashboard: serialised key names must not change.
    """
    file_name: str
    file_size: int
    total_rows: int
    total_columns: int
    columns: list[ColumnInfo] = Field(default_factory=list)
    missing_count: int = 0
    missing_percentage: float = 0.0
    duplicate_rows_percentage: float = 0.0
    completeness_score: float = 100.0
    numeric_columns: int = 0
    categorical_columns: int = 0
    outlier_count: int = 0
    stats: dict[str, NumericStats] = Field(default_factory=dict)
    preview: list[Row] = Field(default_factory=list)
    column_distribution: dict[str, dict[str, int]] = Field(default_factory=dict)
    numeric_data: dict[str, list[float]] = Field(default_factory=dict)
    categorical_data: dict[str, list[str]] = Field(default_factory=dict)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, raw: str) -> "Profile":
        return cls.model_validate_json(raw)

    def column(self, name: str) -> ColumnInfo:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(f"No column named {name!r} in profile of {self.file_name}")


class AnalysisRecord(_ProfileModel):
    """
    An archived profile.

    uploaded_at / expires_at: ISO8601 UTC timestamps; records past expires_at
    are removed by `csv-profiler cleanup`.
    """
    analysis_id: str
    file_name: str
    file_size: int
    total_rows: int
    total_columns: int
    uploaded_at: str
    expires_at: Optional[str] = None
    analysis_data: Profile

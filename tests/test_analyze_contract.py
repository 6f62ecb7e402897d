from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from csv_profiler import (
    ColumnType,
    DatasetTooLargeError,
    DegenerateColumnWarning,
    EmptyDatasetError,
    IngestionError,
    Profile,
    ProfilerConfig,
    analyze,
)

FIXTURE = Path(__file__).parent / "fixtures" / "orders.csv"

PROFILE_KEYS = {
    "fileName",
    "fileSize",
    "totalRows",
    "totalColumns",
    "columns",
    "missingCount",
    "missingPercentage",
    "duplicateRowsPercentage",
    "completenessScore",
    "numericColumns",
    "categoricalColumns",
    "outlierCount",
    "stats",
    "preview",
    "columnDistribution",
    "numericData",
    "categoricalData",
}


def test_fixture_profile_headline_metrics() -> None:
    p = analyze(FIXTURE, "orders.csv")

    assert p.file_name == "orders.csv"
    assert p.file_size == FIXTURE.stat().st_size
    assert p.total_rows == 12
    assert p.total_columns == 6
    assert [c.name for c in p.columns] == ["order_id", "order_date", "region", "units", "paid", "notes"]
    assert [c.type for c in p.columns] == [
        ColumnType.NUMERIC,
        ColumnType.DATE,
        ColumnType.CATEGORICAL,
        ColumnType.NUMERIC,
        ColumnType.BOOLEAN,
        ColumnType.CATEGORICAL,
    ]
    assert p.column("order_id").unique_values == 11
    assert p.column("notes").unique_values == 2

    assert p.numeric_columns == 2
    assert p.categorical_columns == 2
    # region has 1 empty cell, notes has 10, over 12 x 6 cells.
    assert p.missing_count == 11
    assert p.missing_percentage == 15.28
    assert p.completeness_score == pytest.approx(100 - p.missing_percentage)
    assert p.duplicate_rows_percentage == 8.33


def test_fixture_numeric_columns() -> None:
    p = analyze(FIXTURE, "orders.csv")

    # "abc" in units is dropped before summarising.
    assert p.numeric_data["units"] == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 100.0, 100.0]
    units = p.stats["units"]
    assert (units.q1, units.median, units.q3, units.iqr) == (3.0, 6.0, 9.0, 6.0)
    assert units.mean == 22.27
    assert (units.min, units.max) == (1.0, 100.0)

    # units has two 100s above 9 + 1.5 * 6; order_id has none.
    assert p.outlier_count == 2
    assert set(p.stats) == {"order_id", "units"}


def test_fixture_categorical_columns() -> None:
    p = analyze(FIXTURE, "orders.csv")

    assert set(p.column_distribution) == {"region", "notes"}
    assert p.column_distribution["region"] == {"West": 5, "East": 4, "North": 1, "null": 1, "South": 1}
    assert list(p.column_distribution["notes"]) == ["null", "rush", "gift"]
    assert p.categorical_data["region"][7] == ""
    assert len(p.categorical_data["notes"]) == 12


def test_preview_is_first_ten_rows_verbatim() -> None:
    p = analyze(FIXTURE, "orders.csv")
    assert len(p.preview) == 10
    assert p.preview[0] == {
        "order_id": "1",
        "order_date": "2024-01-03",
        "region": "West",
        "units": "1",
        "paid": "yes",
        "notes": "",
    }
    assert list(p.preview[3].keys()) == [c.name for c in p.columns]


def test_short_file_preview_is_not_an_error() -> None:
    p = analyze(b"a,b\n1,x\n2,y\n", "tiny.csv")
    assert len(p.preview) == 2
    assert p.file_size == len(b"a,b\n1,x\n2,y\n")


def test_json_shape_and_round_trip() -> None:
    p = analyze(FIXTURE, "orders.csv")
    obj = json.loads(p.to_json())
    assert set(obj) == PROFILE_KEYS
    assert set(obj["columns"][0]) == {"name", "type", "uniqueValues"}
    assert obj["columns"][1]["type"] == "date"
    assert set(obj["stats"]["units"]) == {"mean", "median", "std", "min", "max", "q1", "q3", "iqr"}

    restored = Profile.from_json(p.to_json())
    assert restored == p
    assert restored.to_dict() == p.to_dict()


def test_accepts_bytes_and_streams() -> None:
    raw = FIXTURE.read_bytes()
    from_path = analyze(FIXTURE, "orders.csv")
    assert analyze(raw, "orders.csv") == from_path
    assert analyze(io.BytesIO(raw), "orders.csv") == from_path
    assert analyze(io.StringIO(raw.decode("utf-8")), "orders.csv") == from_path


def test_declared_size_wins() -> None:
    p = analyze(b"a\n1\n", "x.csv", 999)
    assert p.file_size == 999


def test_utf8_bom_is_stripped_from_header() -> None:
    p = analyze("\ufeffname,score\nAda,1\n".encode("utf-8"), "bom.csv")
    assert [c.name for c in p.columns] == ["name", "score"]


def test_quoted_fields_follow_standard_csv() -> None:
    p = analyze(b'name,note\n"Smith, J","said ""hi"""\nLee,plain\n', "q.csv")
    assert p.preview[0] == {"name": "Smith, J", "note": 'said "hi"'}


@pytest.mark.parametrize("raw", [b"", b"a,b,c\n", b"a,b\n\n\n"])
def test_no_data_rows_is_empty_dataset(raw: bytes) -> None:
    with pytest.raises(EmptyDatasetError):
        analyze(raw, "empty.csv")


def test_missing_file_is_ingestion_error(tmp_path: Path) -> None:
    with pytest.raises(IngestionError):
        analyze(tmp_path / "nope.csv", "nope.csv")


def test_undecodable_source_is_ingestion_error() -> None:
    with pytest.raises(IngestionError) as ei:
        analyze(b"a,b\n\xff\xfe,1\n", "bad.csv")
    assert isinstance(ei.value.__cause__, UnicodeDecodeError)


def test_duplicate_header_is_ingestion_error() -> None:
    with pytest.raises(IngestionError, match="Duplicate column"):
        analyze(b"a,a\n1,2\n", "dup.csv")


def test_size_limit_fails_fast(tmp_path: Path) -> None:
    cfg = ProfilerConfig(max_file_bytes=16)
    big = b"a,b\n" + b"1,2\n" * 10
    with pytest.raises(DatasetTooLargeError):
        analyze(big, "big.csv", config=cfg)
    with pytest.raises(DatasetTooLargeError):
        analyze(io.BytesIO(big), "big.csv", config=cfg)
    with pytest.raises(DatasetTooLargeError):
        analyze(b"a\n1\n", "declared.csv", 10_000, config=cfg)

    path = tmp_path / "big.csv"
    path.write_bytes(big)
    with pytest.raises(IngestionError):
        analyze(path, "big.csv", config=cfg)


def test_ragged_rows_are_padded_to_header_width() -> None:
    raw = b"a,b,c\n1,2,3\n4,5\n6,7,8,9\n"
    p = analyze(raw, "ragged.csv")
    assert p.total_columns == 3
    assert p.preview[1] == {"a": "4", "b": "5", "c": ""}
    assert p.preview[2] == {"a": "6", "b": "7", "c": "8"}
    # Padded cell counts as missing over 3 rows x 3 header columns.
    assert p.missing_count == 1
    assert p.missing_percentage == 11.11


def test_ragged_rows_can_be_rejected() -> None:
    cfg = ProfilerConfig(ragged_rows="reject")
    with pytest.raises(IngestionError, match="Line 3"):
        analyze(b"a,b,c\n1,2,3\n4,5\n", "ragged.csv", config=cfg)


def test_all_infinite_numeric_column_is_degenerate_not_fatal() -> None:
    raw = b"x,y\nInfinity,a\nInfinity,b\n-Infinity,c\n"
    with pytest.warns(DegenerateColumnWarning):
        p = analyze(raw, "inf.csv")
    assert p.column("x").type == ColumnType.NUMERIC
    assert p.stats["x"].model_dump() == dict.fromkeys(["mean", "median", "std", "min", "max", "q1", "q3", "iqr"], 0.0)
    assert p.numeric_data["x"] == []
    assert p.outlier_count == 0


def test_worker_pool_matches_sequential() -> None:
    sequential = analyze(FIXTURE, "orders.csv", config=ProfilerConfig(max_workers=1))
    pooled = analyze(FIXTURE, "orders.csv", config=ProfilerConfig(max_workers=4))
    assert pooled == sequential
    assert [c.name for c in pooled.columns] == [c.name for c in sequential.columns]


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CSV_PROFILER_MAX_FILE_BYTES", "2048")
    monkeypatch.setenv("CSV_PROFILER_MAX_WORKERS", "3")
    monkeypatch.setenv("CSV_PROFILER_RAGGED_ROWS", "Reject")
    monkeypatch.setenv("CSV_PROFILER_PREVIEW_ROWS", "not-a-number")
    cfg = ProfilerConfig.from_env()
    assert cfg.max_file_bytes == 2048
    assert cfg.max_workers == 3
    assert cfg.ragged_rows == "reject"
    assert cfg.preview_rows == 10


def test_preview_rows_configurable() -> None:
    p = analyze(FIXTURE, "orders.csv", config=ProfilerConfig(preview_rows=3))
    assert len(p.preview) == 3


def test_leading_blank_lines_before_header_are_skipped() -> None:
    p = analyze(b"\n\na,b\n1,2\n3,4\n", "lead.csv")
    assert [c.name for c in p.columns] == ["a", "b"]
    assert p.total_rows == 2
    assert p.preview[0] == {"a": "1", "b": "2"}
    assert p.duplicate_rows_percentage == 0.0


def test_percentages_round_ties_away_from_zero() -> None:
    # One empty cell in 400 x 2 is exactly 0.125% missing.
    raw = b"a,b\n" + b"1,x\n" * 399 + b"2,\n"
    p = analyze(raw, "ties.csv")
    assert p.missing_count == 1
    assert p.missing_percentage == 0.13
    assert p.completeness_score == 99.87
    assert p.duplicate_rows_percentage == 99.5


def test_degenerate_warning_points_at_caller_from_pool() -> None:
    raw = b"x,y\nInfinity,a\n-Infinity,b\n"
    with pytest.warns(DegenerateColumnWarning) as record:
        analyze(raw, "inf.csv", config=ProfilerConfig(max_workers=2))
    assert len(record) == 1
    assert record[0].filename == __file__


def test_preview_rows_zero_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CSV_PROFILER_PREVIEW_ROWS", "0")
    monkeypatch.setenv("CSV_PROFILER_MAX_WORKERS", "0")
    cfg = ProfilerConfig.from_env()
    assert cfg.preview_rows == 0
    assert cfg.max_workers == 1
    assert analyze(b"a\n1\n", "one.csv", config=cfg).preview == []

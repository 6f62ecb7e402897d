from __future__ import annotations

import os
from pathlib import Path


def archive_root() -> Path:
    """
    Directory holding archived profiles.

    CSV_PROFILER_HOME overrides the default of ./profiles.
    """
    override = os.environ.get("CSV_PROFILER_HOME", "").strip()
    if override:
        return Path(override)
    return Path.cwd() / "profiles"


def record_path(analysis_id: str) -> Path:
    return archive_root() / f"{analysis_id}.json"


def default_profile_path(csv_path: Path) -> Path:
    return csv_path.with_name(f"{csv_path.stem}.profile.json")


def default_cleaned_path(csv_path: Path) -> Path:
    return csv_path.with_name(f"cleaned_{csv_path.name}")

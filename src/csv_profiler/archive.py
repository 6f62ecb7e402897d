from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from .config import ProfilerConfig
from .errors import ArchiveNotFoundError
from .models import AnalysisRecord, Profile
from .paths import archive_root, record_path
from .utils import iso_in_days, new_id, parse_iso, read_json, utcnow, write_json

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def save_profile(profile: Profile, *, retention_days: Optional[int] = None) -> AnalysisRecord:
    """
    Archive a profile as <archive_root>/<analysis_id>.json.

    The record expires retention_days after upload (default from
    ProfilerConfig.from_env(), 30 days).
    """
    days = retention_days if retention_days is not None else ProfilerConfig.from_env().retention_days
    uploaded = utcnow()
    record = AnalysisRecord(
        analysis_id=new_id(),
        file_name=profile.file_name,
        file_size=profile.file_size,
        total_rows=profile.total_rows,
        total_columns=profile.total_columns,
        uploaded_at=uploaded.isoformat(),
        expires_at=iso_in_days(days, start=uploaded),
        analysis_data=profile,
    )
    write_json(record_path(record.analysis_id), record.model_dump(mode="json", by_alias=True))
    logger.info("Archived profile of %s as %s", profile.file_name, record.analysis_id)
    return record


def load_record(analysis_id: str) -> AnalysisRecord:
    path = record_path(_checked_id(analysis_id))
    if not path.exists():
        raise ArchiveNotFoundError(f"Analysis not found: {analysis_id}")
    return AnalysisRecord.model_validate(read_json(path))


def delete_record(analysis_id: str) -> None:
    path = record_path(_checked_id(analysis_id))
    if not path.exists():
        raise ArchiveNotFoundError(f"Analysis not found: {analysis_id}")
    path.unlink()
    logger.info("Deleted archived analysis %s", analysis_id)


def list_records(*, limit: int = 10, skip: int = 0) -> tuple[list[AnalysisRecord], int]:
    """Return (page of records newest first, total record count)."""
    records = _all_records()
    records.sort(key=lambda r: parse_iso(r.uploaded_at), reverse=True)
    return records[skip : skip + limit], len(records)


def cleanup_expired(*, now: Optional[datetime] = None) -> int:
    """
    Delete archived records whose expires_at has passed.

    v1-simple: scans the archive directory, no index.
    """
    cutoff = now or utcnow()
    deleted = 0
    for record in _all_records():
        if not record.expires_at:
            continue
        if parse_iso(record.expires_at) <= cutoff:
            record_path(record.analysis_id).unlink(missing_ok=True)
            deleted += 1
    if deleted:
        logger.info("Removed %d expired analysis record(s)", deleted)
    return deleted


def _all_records() -> list[AnalysisRecord]:
    root = archive_root()
    if not root.exists():
        return []

    records: list[AnalysisRecord] = []
    for path in sorted(root.glob("*.json")):
        try:
            records.append(AnalysisRecord.model_validate(read_json(path)))
        except (ValueError, ValidationError) as exc:
            # Foreign or half-written files are skipped, not fatal.
            logger.warning("Skipping unreadable archive file %s: %s", path.name, exc)
    return records


def _checked_id(analysis_id: str) -> str:
    if not _ID_RE.match(analysis_id):
        raise ArchiveNotFoundError(f"Analysis not found: {analysis_id}")
    return analysis_id

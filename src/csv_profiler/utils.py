from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    return utcnow().isoformat()


def iso_in_days(days: int, *, start: datetime | None = None) -> str:
    return ((start or utcnow()) + timedelta(days=days)).isoformat()


def parse_iso(dt: str) -> datetime:
    parsed = datetime.fromisoformat(dt)
    # Records written before timestamps carried an offset are treated as UTC.
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False), encoding="utf-8")


def round_half_up(x: float, ndigits: int = 2) -> float:
    """Round the exact binary value of x, with ties away from zero."""
    exp = Decimal(1).scaleb(-ndigits)
    return float(Decimal(x).quantize(exp, rounding=ROUND_HALF_UP))

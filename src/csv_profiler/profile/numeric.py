from __future__ import annotations

import math
from typing import Iterable

import pandas as pd

from ..models import NumericStats
from ..utils import round_half_up as _round


def _sorted_series(values: Iterable[float]) -> pd.Series:
    s = pd.Series(list(values), dtype="float64")
    s = s.replace([math.inf, -math.inf], math.nan).dropna()
    return s.sort_values(ignore_index=True)


def _pick(s: pd.Series, fraction: float) -> float:
    # Nearest rank: the element at floor(n * fraction), never interpolated.
    return float(s.iloc[int(math.floor(s.shape[0] * fraction))])


def quartiles(values: Iterable[float]) -> tuple[float, float]:
    """Return (q1, q3) by nearest rank. Both are 0.0 for an empty input."""
    s = _sorted_series(values)
    if s.empty:
        return 0.0, 0.0
    return _pick(s, 0.25), _pick(s, 0.75)


def summarize(values: Iterable[float]) -> NumericStats:
    """Order statistics of a numeric column.

    Median and quartiles pick a single sorted element (median is the element
    at n // 2 even when n is even); std is the population standard deviation.
    An empty input gives the all-zero record.
    """
    s = _sorted_series(values)
    if s.empty:
        return NumericStats()

    q1, q3 = _pick(s, 0.25), _pick(s, 0.75)
    return NumericStats(
        mean=_round(float(s.mean())),
        median=_round(_pick(s, 0.5)),
        std=_round(float(s.std(ddof=0))),
        min=_round(float(s.iloc[0])),
        max=_round(float(s.iloc[-1])),
        q1=_round(q1),
        q3=_round(q3),
        iqr=_round(q3 - q1),
    )


def outlier_bounds(values: Iterable[float], *, multiplier: float = 1.5) -> tuple[float, float]:
    q1, q3 = quartiles(values)
    iqr = q3 - q1
    return q1 - multiplier * iqr, q3 + multiplier * iqr


def count_outliers(values: Iterable[float], *, multiplier: float = 1.5) -> int:
    """Count values strictly outside [q1 - k*iqr, q3 + k*iqr].

    Fewer than four values never have outliers.
    """
    s = _sorted_series(values)
    if s.shape[0] < 4:
        return 0
    lower, upper = outlier_bounds(s, multiplier=multiplier)
    return int(((s < lower) | (s > upper)).sum())

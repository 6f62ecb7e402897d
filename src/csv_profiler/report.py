from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Literal, Optional

from .models import Profile
from .profile.distribution import top_categories

logger = logging.getLogger(__name__)

DEFAULT_LLM_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = "You are a highly skilled Data Scientist providing actionable insights from dataset summaries."


@dataclass(frozen=True)
class ReportOutcome:
    """Markdown report and where it came from."""

    text: str
    generated_by: Literal["openai", "fallback"]
    model: Optional[str] = None


def build_report_prompt(profile: Profile, *, max_stats_columns: int = 10) -> str:
    """Compact, non-row-level prompt built from the profile's headline metrics."""

    summarized = {
        name: stats.model_dump()
        for name, stats in list(profile.stats.items())[:max_stats_columns]
    }
    return (
        f'You are an expert Data Analyst. I have analyzed a dataset named "{profile.file_name}".\n'
        "Here are the key metrics:\n"
        f"- Total Rows: {profile.total_rows}\n"
        f"- Total Columns: {profile.total_columns} "
        f"({profile.numeric_columns} numeric, {profile.categorical_columns} categorical)\n"
        f"- Missing Data: {profile.missing_percentage}%\n"
        f"- Duplicate Rows: {profile.duplicate_rows_percentage}%\n"
        f"- Completeness Score: {profile.completeness_score}/100\n"
        f"- Total Outliers: {profile.outlier_count}\n"
        "\n"
        f"Statistical Highlights (up to {max_stats_columns} columns):\n"
        f"{json.dumps(summarized, indent=2)}\n"
        "\n"
        "Please write a comprehensive, easy-to-read analytical report (in Markdown format).\n"
        "Include:\n"
        "1. An Executive Summary.\n"
        "2. Data Health & Quality Assessment.\n"
        "3. Key Insights based on the provided statistics (focus on mean, outliers, min/max).\n"
        "4. Recommendations for Next Steps or Data Cleaning.\n"
        "Keep it professional and concise.\n"
    )


def generate_report(profile: Profile, *, use_llm: bool = True) -> ReportOutcome:
    """
    Produce a Markdown report for a profile.

    Uses OpenAI when requested and configured; otherwise, or on any provider
    failure, returns the deterministic fallback. Never raises because of the LLM.
    """
    if use_llm:
        model = os.getenv("CSV_PROFILER_LLM_MODEL", DEFAULT_LLM_MODEL)
        text = _try_openai_chat(build_report_prompt(profile), model=model)
        if text:
            return ReportOutcome(text=text, generated_by="openai", model=model)
    return ReportOutcome(text=render_fallback_report(profile), generated_by="fallback")


def _try_openai_chat(prompt: str, *, model: str) -> Optional[str]:
    """Best-effort chat completion; None when unconfigured or failing."""

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        return None
    try:
        # Lazy import so tests and offline installs remain unaffected.
        from openai import OpenAI  # type: ignore

        client = OpenAI(api_key=api_key)
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
            max_tokens=1500,
        )
        text = resp.choices[0].message.content or ""
        return text.strip() or None
    except Exception as exc:  # noqa: BLE001
        logger.warning("LLM report generation failed, using fallback: %s: %s", type(exc).__name__, exc)
        return None


def render_fallback_report(profile: Profile) -> str:
    """Deterministic Markdown report computed only from the profile."""

    lines: list[str] = []
    lines.append(f"# Data Report: {profile.file_name}\n")
    lines.append("_Generated without an LLM (deterministic fallback)._\n")

    lines.append("\n## Executive Summary\n")
    lines.append(
        f"- Dataset shape: {profile.total_rows} rows × {profile.total_columns} columns "
        f"({profile.numeric_columns} numeric, {profile.categorical_columns} categorical).\n"
    )
    lines.append(f"- Completeness score: {profile.completeness_score}/100.\n")
    lines.append(f"- Outliers flagged by the IQR rule: {profile.outlier_count}.\n")

    lines.append("\n## Data Health & Quality Assessment\n")
    lines.append(f"- Missing cells: {profile.missing_count} ({profile.missing_percentage}%).\n")
    lines.append(f"- Duplicate rows: {profile.duplicate_rows_percentage}%.\n")
    other = [c.name for c in profile.columns if c.type.value in ("date", "boolean", "unknown")]
    if other:
        lines.append(f"- Date, boolean or empty columns (no statistics): {', '.join(other)}.\n")

    lines.append("\n## Key Insights\n")
    if profile.stats:
        lines.append("| column | mean | median | std | min | max | iqr |\n")
        lines.append("|---|---|---|---|---|---|---|\n")
        for name, s in list(profile.stats.items())[:10]:
            lines.append(f"| {name} | {s.mean} | {s.median} | {s.std} | {s.min} | {s.max} | {s.iqr} |\n")
    else:
        lines.append("- No numeric columns were detected.\n")
    for name, dist in profile.column_distribution.items():
        top = ", ".join(f"{value} ({count})" for value, count in top_categories(dist, 3))
        lines.append(f"- `{name}`: {len(dist)} distinct values; most frequent: {top}.\n")

    lines.append("\n## Recommendations\n")
    if profile.duplicate_rows_percentage > 0:
        lines.append("- Remove exact duplicate rows (`csv-profiler clean`).\n")
    if profile.missing_percentage > 0:
        lines.append("- Investigate missing values before aggregating; decide between dropping and imputing.\n")
    if profile.outlier_count > 0:
        lines.append("- Review IQR outliers: confirm whether they are data-entry errors or real extremes.\n")
    if profile.duplicate_rows_percentage == 0 and profile.missing_percentage == 0 and profile.outlier_count == 0:
        lines.append("- No data-quality issues detected; the dataset is ready for analysis.\n")
    return "".join(lines)

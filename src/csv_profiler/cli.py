from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer

from .archive import cleanup_expired, delete_record, list_records, load_record, save_profile
from .clean import clean_csv
from .config import ProfilerConfig
from .errors import EmptyDatasetError, IngestionError, ProfilerError
from .ingest import analyze
from .models import Profile
from .paths import default_cleaned_path, default_profile_path
from .profile.distribution import top_categories
from .report import generate_report

app = typer.Typer(add_completion=False, help="csv-profiler: statistical profiles of CSV files")

# ---- History commands ----
history_app = typer.Typer(help="Inspect archived profiles.")
app.add_typer(history_app, name="history")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr")) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def profile(
    data: Path = typer.Argument(..., help="Path to CSV file"),
    out: Optional[Path] = typer.Option(None, "--out", help="Where to write the profile JSON"),
    archive: bool = typer.Option(True, "--archive/--no-archive", help="Archive the profile for `history`"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Per-column worker threads"),
):
    """
    Profile a CSV and write <name>.profile.json next to it (or to --out).
    """
    cfg = ProfilerConfig.from_env()
    if workers is not None:
        cfg = replace(cfg, max_workers=workers)

    try:
        result = analyze(data, data.name, config=cfg)
    except EmptyDatasetError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=3)
    except IngestionError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)

    out_path = out or default_profile_path(data)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(result.to_json(indent=2) + "\n", encoding="utf-8")

    _echo_summary(result)
    typer.echo(f"Profile: {out_path}")

    if archive:
        # Archiving is best-effort: the profile on disk is already complete.
        try:
            record = save_profile(result, retention_days=cfg.retention_days)
            typer.echo(f"Archived as analysis_id={record.analysis_id} (expires {record.expires_at})")
        except OSError as e:
            typer.echo(f"WARNING: profile not archived: {e}", err=True)


@app.command()
def clean(
    data: Path = typer.Argument(..., help="Path to CSV file"),
    out: Optional[Path] = typer.Option(None, "--out", help="Where to write the cleaned CSV"),
):
    """
    Drop fully-empty and exact duplicate rows; writes cleaned_<name> by default.
    """
    try:
        outcome = clean_csv(data, out or default_cleaned_path(data))
    except EmptyDatasetError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=3)
    except IngestionError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"Rows: {outcome.rows_in} -> {outcome.rows_out}")
    typer.echo(f"Dropped: {outcome.empty_rows_dropped} empty, {outcome.duplicates_dropped} duplicate")
    typer.echo(f"Cleaned CSV: {outcome.out_path}")


@app.command()
def report(
    profile_path: Optional[Path] = typer.Option(None, "--profile", help="Profile JSON written by `profile`"),
    analysis_id: Optional[str] = typer.Option(None, "--analysis-id", help="Archived analysis id"),
    llm: bool = typer.Option(True, "--llm/--no-llm", help="Use an LLM if OPENAI_API_KEY is set (default: on)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the Markdown report here instead of stdout"),
):
    """
    Turn a profile into a Markdown report.

    Exactly one of --profile or --analysis-id is required.
    """
    if (profile_path is None) == (analysis_id is None):
        typer.echo("Provide exactly one of --profile or --analysis-id.", err=True)
        raise typer.Exit(code=1)

    try:
        if profile_path is not None:
            prof = Profile.from_json(profile_path.read_text(encoding="utf-8"))
        else:
            prof = load_record(analysis_id or "").analysis_data
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except ValueError as e:
        typer.echo(f"ERROR: not a valid profile: {e}", err=True)
        raise typer.Exit(code=1)

    outcome = generate_report(prof, use_llm=llm)
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(outcome.text.rstrip() + "\n", encoding="utf-8")
        typer.echo(f"Report ({outcome.generated_by}): {out}")
    else:
        typer.echo(outcome.text.rstrip())


@history_app.command("list")
def history_list(
    limit: int = typer.Option(10, "--limit", min=1),
    skip: int = typer.Option(0, "--skip", min=0),
) -> None:
    """
    List archived profiles, newest first.
    """
    records, total = list_records(limit=limit, skip=skip)
    for r in records:
        typer.echo(
            f"{r.analysis_id}  {r.uploaded_at}  {r.file_name}  "
            f"{r.total_rows} rows x {r.total_columns} cols"
        )
    typer.echo(f"Showing {len(records)} of {total}")


@history_app.command("show")
def history_show(analysis_id: str = typer.Argument(...)) -> None:
    """
    Print an archived record as JSON.
    """
    try:
        record = load_record(analysis_id)
    except ProfilerError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    typer.echo(json.dumps(record.model_dump(mode="json", by_alias=True), indent=2))


@history_app.command("delete")
def history_delete(analysis_id: str = typer.Argument(...)) -> None:
    """
    Delete an archived record.
    """
    try:
        delete_record(analysis_id)
    except ProfilerError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    typer.echo(f"Deleted analysis {analysis_id}")


@app.command()
def cleanup():
    """
    Delete archived profiles past their retention window.
    """
    try:
        n = cleanup_expired()
        typer.echo(f"Cleanup complete. Deleted {n} expired record(s).")
    except OSError as e:
        typer.echo(f"ERROR: {e}")
        raise typer.Exit(code=1)


def _echo_summary(p: Profile) -> None:
    typer.echo(f"File: {p.file_name} ({p.file_size} bytes)")
    typer.echo(
        f"Rows: {p.total_rows}  Columns: {p.total_columns} "
        f"({p.numeric_columns} numeric, {p.categorical_columns} categorical)"
    )
    typer.echo(
        f"Missing: {p.missing_count} cells ({p.missing_percentage}%)  "
        f"Duplicates: {p.duplicate_rows_percentage}%  Completeness: {p.completeness_score}"
    )
    typer.echo(f"Outliers: {p.outlier_count}")
    for c in p.columns:
        line = f"  {c.name}: {c.type.value}, {c.unique_values} unique"
        if c.name in p.stats:
            s = p.stats[c.name]
            line += f", mean={s.mean} median={s.median} min={s.min} max={s.max}"
        elif c.name in p.column_distribution:
            top = top_categories(p.column_distribution[c.name], 3)
            line += ", top: " + ", ".join(f"{v} ({n})" for v, n in top)
        typer.echo(line)

# ABOUTME: Provides a CLI that renders performance and attendance analytics from record exports.
# ABOUTME: Prints Rich tables per student, cohort grouping, exam, and attendance view.

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.attendance.aggregation import aggregate_attendance_by, low_attendance_students, weekly_attendance_trend
from src.attendance.classification import classify_attendance
from src.cohort.aggregation import GROUPINGS, aggregate_by, rank_buckets, rank_profiles
from src.cohort.exam_analysis import analyze_exams
from src.cohort.reporting import (
    attendance_to_frame,
    buckets_to_frame,
    exam_summaries_to_frame,
    format_percentage,
    profiles_to_frame,
)
from src.common.config import DEFAULT_CONFIG, AnalyticsConfig, load_config
from src.common.data_pipeline import load_attendance_records, load_score_records, load_student_contexts
from src.common.schemas import AttendanceRecord, ScoreRecord, StudentContext
from src.performance.profile import build_cohort_profiles, build_student_profile, summarize_profiles

console = Console()
app = typer.Typer(help="Render performance and attendance analytics from score and attendance exports.")

RISK_COLORS = {"Safe": "green", "At Risk": "orange3", "High Risk": "red"}
ATTENDANCE_COLORS = {"Good": "green", "Low": "yellow", "Critical": "red"}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log record exclusions and loader details.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def student(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    scores_path: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Marks export (.csv or .parquet)."),
    attendance_path: Optional[Path] = typer.Option(None, "--attendance", exists=True, dir_okay=False, help="Attendance export."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Analytics config YAML."),
) -> None:
    """
    Show one student's average, learner band, trend, risk, and attendance.
    """
    cfg = _load_config(config)
    scores = _load_scores(scores_path)
    attendance = _load_attendance(attendance_path)
    profile = build_student_profile(student_id, scores, attendance, cfg)

    console.rule(f"[bold blue]Student {student_id}[/bold blue]")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Exams", str(profile.exam_count))
    table.add_row("Average", format_percentage(profile.average))
    table.add_row("Classification", profile.classification.label if profile.classification else "No data")
    table.add_row("Summary", profile.summary.value if profile.summary else "No data")
    table.add_row("Trend", profile.trend.direction.value)
    if profile.risk:
        color = RISK_COLORS.get(profile.risk.level.value, "white")
        table.add_row("Risk", f"[{color}]{profile.risk.level.value}[/{color}]")
    else:
        table.add_row("Risk", "No data")
    table.add_row("Recent scores", ", ".join(format_percentage(v) for v in profile.recent_scores) or "-")
    table.add_row("Attendance", _attendance_cell(profile.attendance.percentage, cfg))
    table.add_row("Classes recorded", str(profile.attendance.total))
    console.print(table)


@app.command()
def cohort(
    scores_path: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Marks export (.csv or .parquet)."),
    by: str = typer.Option("subject", "--by", help=f"Grouping: {', '.join(GROUPINGS)}."),
    students_path: Optional[Path] = typer.Option(
        None, "--students", exists=True, dir_okay=False, help="Student export with department/semester/batch."
    ),
    rank: bool = typer.Option(True, "--rank/--no-rank", help="Order groups by mean with tie-aware ranks."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Analytics config YAML."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the report to .csv or .parquet."),
) -> None:
    """
    Aggregate exam percentages by department, semester, subject, exam type, student, or batch.
    """
    if by not in GROUPINGS:
        raise typer.BadParameter(f"Unsupported grouping '{by}'. Expected one of: {', '.join(GROUPINGS)}.", param_hint="--by")
    cfg = _load_config(config)
    contexts = _load_contexts(students_path)
    if by in ("department", "semester", "batch") and not contexts:
        raise typer.BadParameter(f"Grouping by {by} requires --students.", param_hint="--students")

    scores = _load_scores(scores_path)
    buckets = aggregate_by(scores, GROUPINGS[by](contexts), cfg)
    ranking = rank_buckets(buckets) if rank else ()
    df = buckets_to_frame(buckets, ranking)

    console.rule(f"[bold blue]Performance by {by}[/bold blue]")
    table = Table(show_header=True, header_style="bold magenta")
    columns = (["Rank"] if rank else []) + [by.title(), "Scores", "Mean", "Excellent", "Good", "Average", "Poor"]
    for column in columns:
        table.add_column(column)
    for row in df.to_dict("records"):
        cells = [] if not rank else [_cell(row["rank"])]
        cells += [row["key"], str(row["count"]), format_percentage(row["mean"])]
        cells += [str(row[band]) for band in ("Excellent", "Good", "Average", "Poor")]
        table.add_row(*cells)
    console.print(table)
    _write_frame(df, output)


@app.command()
def profiles(
    scores_path: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Marks export (.csv or .parquet)."),
    attendance_path: Optional[Path] = typer.Option(None, "--attendance", exists=True, dir_okay=False, help="Attendance export."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Analytics config YAML."),
    risk: Optional[str] = typer.Option(None, "--risk", help="Only list students at this risk level."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the report to .csv or .parquet."),
) -> None:
    """
    Rank every student by average and summarize learner bands, trends, and risk.
    """
    cfg = _load_config(config)
    student_profiles = build_cohort_profiles(_load_scores(scores_path), _load_attendance(attendance_path), cfg)
    df = profiles_to_frame(student_profiles, rank_profiles(student_profiles))
    if risk:
        df = df[df["risk"] == risk]

    summary = summarize_profiles(student_profiles)
    console.rule("[bold blue]Cohort summary[/bold blue]")
    console.print(f"[bold]Students:[/] {summary.total_students}  [bold]No data:[/] {summary.no_data}")
    console.print("  ".join(f"[bold]{band}:[/] {count}" for band, count in summary.band_counts.items()))
    console.print(
        f"[bold]Improving:[/] {summary.improving}  [bold]Declining:[/] {summary.declining}  "
        f"[bold]At risk:[/] {summary.at_risk}  [bold]Low attendance:[/] {summary.low_attendance}"
    )

    table = Table(show_header=True, header_style="bold magenta")
    for column in ("Rank", "Student", "Average", "Band", "Trend", "Risk", "Attendance"):
        table.add_column(column)
    for row in df.to_dict("records"):
        risk_level = _cell(row["risk"], "No data")
        color = RISK_COLORS.get(risk_level, "white")
        table.add_row(
            _cell(row["rank"]),
            row["student_id"],
            format_percentage(row["average"]),
            _cell(row["classification"], "No data"),
            row["trend"],
            f"[{color}]{risk_level}[/{color}]",
            _attendance_cell(row["attendance_pct"], cfg),
        )
    console.print(table)
    _write_frame(df, output)


@app.command()
def attendance(
    attendance_path: Path = typer.Option(..., "--attendance", exists=True, dir_okay=False, help="Attendance export."),
    by: str = typer.Option("subject", "--by", help="Grouping: subject or student."),
    weeks: int = typer.Option(12, "--weeks", help="Number of recent weeks in the trend."),
    low_limit: int = typer.Option(8, "--low-limit", help="Students listed below the threshold."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Analytics config YAML."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the grouped report to .csv or .parquet."),
) -> None:
    """
    Summarize attendance per subject or student, weekly rates, and students below the threshold.
    """
    key_fns = {"subject": lambda r: r.subject_code, "student": lambda r: r.student_id}
    if by not in key_fns:
        raise typer.BadParameter(f"Unsupported grouping '{by}'. Expected one of: subject, student.", param_hint="--by")
    cfg = _load_config(config)
    records = _load_attendance(attendance_path)

    grouped = aggregate_attendance_by(records, key_fns[by], cfg)
    df = attendance_to_frame(dict(sorted(grouped.items())))

    console.rule(f"[bold blue]Attendance by {by}[/bold blue]")
    table = Table(show_header=True, header_style="bold magenta")
    for column in (by.title(), "Classes", "Present", "Absent", "Late", "Excused", "Attendance"):
        table.add_column(column)
    for row in df.itertuples(index=False):
        table.add_row(
            row.key,
            str(row.total),
            str(row.present),
            str(row.absent),
            str(row.late),
            str(row.excused),
            _attendance_cell(row.percentage, cfg),
        )
    console.print(table)

    console.print()
    console.print("[bold yellow]Weekly attendance[/bold yellow]")
    for start, summary in weekly_attendance_trend(records, weeks, cfg):
        console.print(f"  {start.isoformat()}: {format_percentage(summary.percentage)} of {summary.total}")

    low = low_attendance_students(records, cfg, limit=low_limit)
    console.print()
    if not low:
        console.print(f"[green]No students below {cfg.attendance_threshold:g}% attendance[/green]")
    else:
        console.print(f"[bold red]Below {cfg.attendance_threshold:g}% attendance[/bold red]")
        for (student_id, subject_code), summary in low:
            console.print(f"  {student_id} {subject_code}: {summary.attended}/{summary.total} ({format_percentage(summary.percentage)})")
    _write_frame(df, output)


@app.command()
def exams(
    scores_path: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Marks export (.csv or .parquet)."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Analytics config YAML."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the report to .csv or .parquet."),
) -> None:
    """
    Per-exam mean percentage, highest/lowest marks, and pass rate.
    """
    cfg = _load_config(config)
    df = exam_summaries_to_frame(analyze_exams(_load_scores(scores_path), cfg))

    console.rule("[bold blue]Exam analysis[/bold blue]")
    table = Table(show_header=True, header_style="bold magenta")
    for column in ("Exam", "Type", "Date", "Students", "Mean", "Highest", "Lowest", "Pass rate"):
        table.add_column(column)
    for row in df.itertuples(index=False):
        table.add_row(
            row.exam,
            row.exam_type,
            _cell(row.exam_date),
            str(row.students),
            format_percentage(row.mean_percentage),
            _cell(row.highest_marks),
            _cell(row.lowest_marks),
            format_percentage(row.pass_rate),
        )
    console.print(table)
    _write_frame(df, output)


def _load_config(path: Optional[Path]) -> AnalyticsConfig:
    if path is None:
        return DEFAULT_CONFIG
    try:
        return load_config(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _load_scores(path: Path) -> List[ScoreRecord]:
    try:
        return load_score_records(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--scores") from exc


def _load_attendance(path: Optional[Path]) -> List[AttendanceRecord]:
    if path is None:
        return []
    try:
        return load_attendance_records(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--attendance") from exc


def _load_contexts(path: Optional[Path]) -> List[StudentContext]:
    if path is None:
        return []
    try:
        return load_student_contexts(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--students") from exc


def _cell(value, missing: str = "-") -> str:
    if value is None or pd.isna(value):
        return missing
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _attendance_cell(pct, cfg: AnalyticsConfig) -> str:
    if pct is None or pd.isna(pct):
        return "No data"
    result = classify_attendance(float(pct), cfg)
    color = ATTENDANCE_COLORS.get(result.label, "white")
    return f"[{color}]{format_percentage(pct)} ({result.label})[/{color}]"


def _write_frame(df: pd.DataFrame, output: Optional[Path]) -> None:
    if output is None:
        return
    suffix = output.suffix.lower()
    if suffix not in (".csv", ".parquet"):
        raise typer.BadParameter(f"Unsupported output type '{output.suffix}'. Expected .csv or .parquet.", param_hint="--output")
    output.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".parquet":
        df.to_parquet(output, index=False)
    else:
        df.to_csv(output, index=False)
    console.print(f"[bold]Wrote {len(df):,} rows to {output}[/bold]")


if __name__ == "__main__":
    app()

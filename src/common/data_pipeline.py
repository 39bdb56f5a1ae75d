# ABOUTME: Builds canonical score, attendance, and student records from tabular feeds.
# ABOUTME: Normalizes CSV/parquet exports of the record store into engine inputs.

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from .schemas import AttendanceRecord, AttendanceStatus, ScoreRecord, StudentContext

logger = logging.getLogger(__name__)

SCORE_COLUMNS = ["student_id", "subject_code", "exam_type", "max_marks", "marks_obtained"]
ATTENDANCE_COLUMNS = ["student_id", "subject_code", "date", "status"]
STUDENT_COLUMNS = ["student_id"]
CSV_STRING_DTYPES = {
    column: "string" for column in ("student_id", "subject_code", "exam_id", "department_id", "batch")
}


def load_frame(path: Path) -> pd.DataFrame:
    """
    Read a CSV or parquet export, choosing the reader from the file suffix.
    """

    suffix = path.suffix.lower()
    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix == ".csv":
        return pd.read_csv(path, dtype=CSV_STRING_DTYPES)
    raise ValueError(f"Unsupported file type '{path.suffix}' for {path}. Expected .csv or .parquet.")


def score_records_from_frame(df: pd.DataFrame) -> List[ScoreRecord]:
    """
    Convert a marks frame into ``ScoreRecord`` rows.

    Blank ``max_marks`` become ``None``; zero is kept as given. Either way the
    normalizer excludes the record. Any other non-numeric marks raise
    ``ValueError``.
    """

    _require_columns(df, SCORE_COLUMNS, "score")
    if df.empty:
        return []

    frame = df.copy()
    max_marks = frame["max_marks"]
    blank = max_marks.isna() | max_marks.astype(str).str.strip().eq("")
    frame["max_marks"] = pd.to_numeric(max_marks.mask(blank), errors="raise")
    frame["marks_obtained"] = pd.to_numeric(frame["marks_obtained"], errors="raise")
    _require_present(frame, ["student_id", "subject_code", "exam_type", "marks_obtained"], "score")
    exam_dates = _to_dates(frame["exam_date"]) if "exam_date" in frame.columns else [None] * len(frame)
    exam_ids = frame["exam_id"] if "exam_id" in frame.columns else [None] * len(frame)

    records = []
    for row, exam_date, exam_id in zip(frame.itertuples(index=False), exam_dates, exam_ids):
        records.append(
            ScoreRecord(
                student_id=str(row.student_id),
                subject_code=str(row.subject_code),
                exam_type=str(row.exam_type),
                max_marks=_optional_float(row.max_marks),
                marks_obtained=float(row.marks_obtained),
                exam_date=exam_date,
                exam_id=_optional_str(exam_id),
            )
        )

    missing_denominator = sum(1 for r in records if r.max_marks is None)
    if missing_denominator:
        logger.info("Loaded %d score records (%d without max_marks)", len(records), missing_denominator)
    else:
        logger.info("Loaded %d score records", len(records))
    return records


def attendance_records_from_frame(df: pd.DataFrame) -> List[AttendanceRecord]:
    """Convert an attendance frame into ``AttendanceRecord`` rows."""

    _require_columns(df, ATTENDANCE_COLUMNS, "attendance")
    if df.empty:
        return []

    _require_present(df, ATTENDANCE_COLUMNS, "attendance")
    dates = _to_dates(df["date"])
    if any(d is None for d in dates):
        raise ValueError("Attendance feed contains unparseable dates.")

    records = [
        AttendanceRecord(
            student_id=str(student_id),
            subject_code=str(subject_code),
            date=record_date,
            status=AttendanceStatus.parse(status),
        )
        for student_id, subject_code, record_date, status in zip(
            df["student_id"], df["subject_code"], dates, df["status"]
        )
    ]
    logger.info("Loaded %d attendance records", len(records))
    return records


def student_contexts_from_frame(df: pd.DataFrame) -> List[StudentContext]:
    _require_columns(df, STUDENT_COLUMNS, "student")
    contexts = []
    for _, row in df.iterrows():
        semester = row.get("semester")
        contexts.append(
            StudentContext(
                student_id=str(row["student_id"]),
                department_id=_optional_str(row.get("department_id")),
                semester=None if semester is None or pd.isna(semester) else int(semester),
                batch=_optional_str(row.get("batch")),
            )
        )
    return contexts


def load_score_records(path: Path) -> List[ScoreRecord]:
    return score_records_from_frame(load_frame(path))


def load_attendance_records(path: Path) -> List[AttendanceRecord]:
    return attendance_records_from_frame(load_frame(path))


def load_student_contexts(path: Path) -> List[StudentContext]:
    return student_contexts_from_frame(load_frame(path))


def _require_columns(df: pd.DataFrame, columns: Sequence[str], kind: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required {kind} columns: {', '.join(missing)}.")


def _require_present(df: pd.DataFrame, columns: Sequence[str], kind: str) -> None:
    nulls = [c for c in columns if df[c].isna().any()]
    if nulls:
        raise ValueError(f"Null values in required {kind} columns: {', '.join(nulls)}.")


def _to_dates(values: pd.Series) -> list:
    parsed = pd.to_datetime(values, errors="coerce")
    return [None if pd.isna(ts) else ts.date() for ts in parsed]


def _optional_float(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _optional_str(value) -> Optional[str]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text_value = str(value).strip()
    return text_value or None

# ABOUTME: Converts engine results into pandas DataFrames for display and export.
# ABOUTME: Keeps "no data" as missing values instead of zeros in every report.

from __future__ import annotations

from typing import Hashable, Iterable, Mapping, Sequence

import pandas as pd

from ..common.schemas import AggregateBucket, AttendanceSummary, ExamSummary, RankedEntry, StudentProfile

BUCKET_COLUMNS = ["key", "count", "mean", "highest", "lowest", "Excellent", "Good", "Average", "Poor"]
PROFILE_COLUMNS = [
    "student_id",
    "exam_count",
    "average",
    "classification",
    "summary",
    "trend",
    "risk",
    "attendance_total",
    "attendance_pct",
    "attendance_band",
    "below_threshold",
]
EXAM_COLUMNS = [
    "exam",
    "subject_code",
    "exam_type",
    "exam_date",
    "max_marks",
    "students",
    "mean_percentage",
    "highest_marks",
    "lowest_marks",
    "pass_rate",
]
ATTENDANCE_COLUMNS = ["key", "total", "present", "absent", "late", "excused", "percentage"]


def buckets_to_frame(buckets: Iterable[AggregateBucket], ranking: Sequence[RankedEntry] = ()) -> pd.DataFrame:
    """
    One row per bucket; when ``ranking`` is given a ``rank`` column is added
    and rows follow the ranking order.
    """

    rows = []
    for bucket in buckets:
        row = {
            "key": _label(bucket.key),
            "count": bucket.count,
            "mean": bucket.mean,
            "highest": bucket.highest,
            "lowest": bucket.lowest,
        }
        row.update(bucket.distribution)
        rows.append(row)

    df = pd.DataFrame(rows, columns=BUCKET_COLUMNS)
    if ranking:
        ranks = pd.DataFrame(
            {"key": [_label(e.key) for e in ranking], "rank": [e.rank for e in ranking]}
        )
        df = ranks.merge(df, on="key", how="left", validate="one_to_one")
        df["rank"] = df["rank"].astype("Int64")
    return df


def profiles_to_frame(profiles: Iterable[StudentProfile], ranking: Sequence[RankedEntry] = ()) -> pd.DataFrame:
    rows = []
    for p in profiles:
        attendance_cls = p.attendance_classification
        rows.append(
            {
                "student_id": p.student_id,
                "exam_count": p.exam_count,
                "average": p.average,
                "classification": p.classification.label if p.classification else None,
                "summary": p.summary.value if p.summary else None,
                "trend": p.trend.direction.value,
                "risk": p.risk.level.value if p.risk else None,
                "attendance_total": p.attendance.total,
                "attendance_pct": p.attendance.percentage,
                "attendance_band": attendance_cls.label if attendance_cls else None,
                "below_threshold": attendance_cls.below_threshold if attendance_cls else None,
            }
        )
    df = pd.DataFrame(rows, columns=PROFILE_COLUMNS)
    if ranking:
        ranks = pd.DataFrame({"student_id": [e.key for e in ranking], "rank": [e.rank for e in ranking]})
        df = ranks.merge(df, on="student_id", how="left", validate="one_to_one")
        df["rank"] = df["rank"].astype("Int64")
    return df


def exam_summaries_to_frame(summaries: Iterable[ExamSummary]) -> pd.DataFrame:
    rows = [
        {
            "exam": _label(s.exam_key),
            "subject_code": s.subject_code,
            "exam_type": s.exam_type,
            "exam_date": s.exam_date,
            "max_marks": s.max_marks,
            "students": s.students,
            "mean_percentage": s.mean_percentage,
            "highest_marks": s.highest_marks,
            "lowest_marks": s.lowest_marks,
            "pass_rate": s.pass_rate,
        }
        for s in summaries
    ]
    return pd.DataFrame(rows, columns=EXAM_COLUMNS)


def attendance_to_frame(summaries: Mapping[Hashable, AttendanceSummary]) -> pd.DataFrame:
    rows = [
        {
            "key": _label(key),
            "total": s.total,
            "present": s.present,
            "absent": s.absent,
            "late": s.late,
            "excused": s.excused,
            "percentage": s.percentage,
        }
        for key, s in summaries.items()
    ]
    return pd.DataFrame(rows, columns=ATTENDANCE_COLUMNS)


def format_percentage(value) -> str:
    """One decimal place with a percent sign; missing values render as "-"."""

    if value is None or pd.isna(value):
        return "-"
    return f"{float(value):.1f}%"


def _label(key) -> str:
    if isinstance(key, tuple):
        return " / ".join("" if part is None else str(part) for part in key)
    return str(key)

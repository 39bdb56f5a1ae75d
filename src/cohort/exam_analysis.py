# ABOUTME: Summarizes each exam's results across the students who sat it.
# ABOUTME: Reports mean percentage, highest and lowest marks, and pass rate.

from __future__ import annotations

from datetime import date
from typing import Dict, Hashable, Iterable, List

import numpy as np

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import record_percentage
from ..common.schemas import ExamSummary, ScoreRecord


def exam_key(record: ScoreRecord) -> Hashable:
    """Exam identity: ``exam_id`` when present, else (subject, type, date)."""

    if record.exam_id:
        return record.exam_id
    return (record.subject_code, record.exam_type, record.exam_date)


def analyze_exams(
    records: Iterable[ScoreRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[ExamSummary]:
    """
    Per-exam summaries, most recent exam first (undated exams last).

    Only records with a defined percentage count towards an exam; an exam
    whose records all lack ``max_marks`` is reported with zero students.
    """

    grouped: Dict[Hashable, List[ScoreRecord]] = {}
    for record in records:
        grouped.setdefault(exam_key(record), []).append(record)

    summaries = [_summarize(key, group, config) for key, group in grouped.items()]
    summaries.sort(key=lambda s: (s.exam_date is None, -(s.exam_date or date.min).toordinal(), str(s.exam_key)))
    return summaries


def _summarize(key: Hashable, group: List[ScoreRecord], config: AnalyticsConfig) -> ExamSummary:
    first = group[0]
    valid = [(r, record_percentage(r)) for r in group]
    valid = [(r, pct) for r, pct in valid if pct is not None]

    if not valid:
        return ExamSummary(
            exam_key=key,
            subject_code=first.subject_code,
            exam_type=first.exam_type,
            exam_date=first.exam_date,
            max_marks=first.max_marks,
            students=0,
            mean_percentage=None,
            highest_marks=None,
            lowest_marks=None,
            pass_rate=None,
        )

    marks = np.asarray([r.marks_obtained for r, _ in valid], dtype=float)
    pcts = np.asarray([pct for _, pct in valid], dtype=float)
    return ExamSummary(
        exam_key=key,
        subject_code=first.subject_code,
        exam_type=first.exam_type,
        exam_date=first.exam_date,
        max_marks=valid[0][0].max_marks,
        students=len(valid),
        mean_percentage=float(pcts.mean()),
        highest_marks=float(marks.max()),
        lowest_marks=float(marks.min()),
        pass_rate=float((pcts >= config.pass_cut).mean() * 100.0),
    )

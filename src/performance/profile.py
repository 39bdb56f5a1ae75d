# ABOUTME: Assembles per-student analytics from marks and attendance records.
# ABOUTME: Produces cohort-wide profiles and the headline counts shown on dashboards.

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Sequence

from ..attendance.aggregation import aggregate_attendance
from ..attendance.classification import classify_attendance
from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import mean_percentage
from ..common.schemas import (
    AttendanceRecord,
    CohortSummary,
    LearnerBand,
    LearnerSummary,
    RiskLevel,
    ScoreRecord,
    StudentProfile,
    TrendDirection,
)
from .classification import classify_learner, summarize_learner
from .risk import predict_risk
from .trend import chronological_percentages, detect_trend


def build_student_profile(
    student_id: str,
    scores: Iterable[ScoreRecord],
    attendance: Iterable[AttendanceRecord] = (),
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> StudentProfile:
    """
    Build the analytics profile of one student.

    Only records belonging to ``student_id`` are used. The average is the mean
    of valid exam percentages; trend uses the date-sorted sequence, so callers
    may pass records in any order.
    """

    own_scores = [r for r in scores if r.student_id == student_id]
    own_attendance = [r for r in attendance if r.student_id == student_id]

    ordered = chronological_percentages(own_scores)
    average = mean_percentage(ordered)
    classification = classify_learner(average, config)
    trend = detect_trend(ordered, config)
    attendance_summary = aggregate_attendance(own_attendance, config)

    recent = ordered[-config.trend_window :] if config.trend_window is not None else ordered
    return StudentProfile(
        student_id=student_id,
        exam_count=len(ordered),
        average=average,
        classification=classification,
        summary=summarize_learner(classification),
        trend=trend,
        risk=predict_risk(average, trend.direction, config),
        attendance=attendance_summary,
        attendance_classification=classify_attendance(attendance_summary.percentage, config),
        recent_scores=tuple(recent),
    )


def build_cohort_profiles(
    scores: Iterable[ScoreRecord],
    attendance: Iterable[AttendanceRecord] = (),
    config: AnalyticsConfig = DEFAULT_CONFIG,
    student_ids: Sequence[str] = (),
) -> List[StudentProfile]:
    """
    Profiles for every student seen in either feed, plus any ``student_ids``
    listed explicitly (those with no records get a no-data profile).
    """

    scores_by_student: Dict[str, List[ScoreRecord]] = defaultdict(list)
    attendance_by_student: Dict[str, List[AttendanceRecord]] = defaultdict(list)
    for record in scores:
        scores_by_student[record.student_id].append(record)
    for record in attendance:
        attendance_by_student[record.student_id].append(record)

    all_ids = sorted(set(scores_by_student) | set(attendance_by_student) | set(student_ids))
    return [
        build_student_profile(sid, scores_by_student.get(sid, ()), attendance_by_student.get(sid, ()), config)
        for sid in all_ids
    ]


def summarize_profiles(profiles: Iterable[StudentProfile]) -> CohortSummary:
    """Headline counts for the analytics dashboard."""

    profiles = list(profiles)
    bands = Counter(p.classification.band.value for p in profiles if p.classification is not None)
    summaries = Counter(p.summary.value for p in profiles if p.summary is not None)
    directions = Counter(p.trend.direction for p in profiles if p.average is not None)
    at_risk = sum(
        1 for p in profiles if p.risk is not None and p.risk.level in (RiskLevel.AT_RISK, RiskLevel.HIGH_RISK)
    )
    low_attendance = sum(
        1
        for p in profiles
        if p.attendance_classification is not None and p.attendance_classification.below_threshold
    )

    return CohortSummary(
        total_students=len(profiles),
        band_counts={band.value: bands.get(band.value, 0) for band in LearnerBand},
        summary_counts={view.value: summaries.get(view.value, 0) for view in LearnerSummary},
        improving=directions.get(TrendDirection.IMPROVING, 0),
        declining=directions.get(TrendDirection.DECLINING, 0),
        at_risk=at_risk,
        no_data=sum(1 for p in profiles if p.average is None),
        low_attendance=low_attendance,
    )

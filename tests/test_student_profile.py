# ABOUTME: Tests assembly of per-student profiles and cohort headline counts.
# ABOUTME: Exercises the three-marks scenario and students with no data.

from datetime import date, timedelta

import pytest

from src.cohort.aggregation import rank_profiles
from src.common.schemas import (
    AttendanceRecord,
    LearnerBand,
    LearnerSummary,
    RiskLevel,
    ScoreRecord,
    TrendDirection,
)
from src.performance.profile import build_cohort_profiles, build_student_profile, summarize_profiles


def _score(student_id, marks, day, max_marks=100):
    return ScoreRecord(student_id, "CS101", "class_test", max_marks, marks, date(2024, 1, 1) + timedelta(days=day))


def _attendance(student_id, statuses):
    return [
        AttendanceRecord(student_id, "CS101", date(2024, 1, 1) + timedelta(days=i), status)
        for i, status in enumerate(statuses)
    ]


def test_three_marks_without_attendance():
    scores = [_score("s1", 50, 0), _score("s1", 90, 7), _score("s1", 70, 14)]
    profile = build_student_profile("s1", scores)

    assert profile.exam_count == 3
    assert profile.average == pytest.approx(70.0)
    assert profile.classification.band is LearnerBand.GOOD
    assert profile.summary is LearnerSummary.AVERAGE
    assert profile.trend.direction in (TrendDirection.STABLE, TrendDirection.IMPROVING)
    assert profile.risk.level is RiskLevel.SAFE
    assert profile.attendance.total == 0
    assert profile.attendance.percentage is None
    assert profile.attendance_classification is None


def test_profile_ignores_other_students_and_sorts_by_date():
    scores = [_score("s1", 30, 30), _score("s1", 20, 20), _score("s2", 99, 0), _score("s1", 60, 0), _score("s1", 55, 10)]
    profile = build_student_profile("s1", scores, _attendance("s1", ["present", "absent", "absent", "late"]))
    assert profile.recent_scores == pytest.approx((60, 55, 20, 30))
    assert profile.trend.direction is TrendDirection.DECLINING
    assert profile.risk.level is RiskLevel.SAFE
    assert profile.attendance.percentage == pytest.approx(50.0)
    assert profile.attendance_classification.below_threshold is True


def test_failing_declining_student_is_high_risk():
    scores = [_score("s3", 45, 0), _score("s3", 40, 1), _score("s3", 20, 2), _score("s3", 15, 3)]
    profile = build_student_profile("s3", scores)
    assert profile.classification.band is LearnerBand.POOR
    assert profile.risk.level is RiskLevel.HIGH_RISK


def test_student_without_valid_scores_has_no_classification():
    profile = build_student_profile("s4", [_score("s4", 10, 0, max_marks=0)], _attendance("s4", ["present"]))
    assert profile.exam_count == 0
    assert profile.average is None
    assert profile.classification is None
    assert profile.summary is None
    assert profile.risk is None
    assert profile.trend.direction is TrendDirection.STABLE
    assert profile.attendance.percentage == pytest.approx(100.0)


def test_cohort_profiles_and_summary_counts():
    scores = [
        _score("a", 80, 0), _score("a", 90, 1),
        _score("b", 45, 0), _score("b", 40, 1), _score("b", 20, 2), _score("b", 15, 3),
        _score("c", 40, 0), _score("c", 70, 1),
    ]
    attendance = _attendance("a", ["present"]) + _attendance("d", ["absent", "absent"])
    profiles = build_cohort_profiles(scores, attendance, student_ids=["e"])
    assert [p.student_id for p in profiles] == ["a", "b", "c", "d", "e"]

    summary = summarize_profiles(profiles)
    assert summary.total_students == 5
    assert summary.no_data == 2
    assert summary.band_counts == {"Excellent": 1, "Good": 0, "Average": 1, "Poor": 1}
    assert summary.summary_counts == {"Fast Learner": 1, "Average Learner": 1, "Slow Learner": 1}
    assert summary.improving == 2
    assert summary.declining == 1
    assert summary.at_risk == 1
    assert summary.low_attendance == 1

    ranking = rank_profiles(profiles)
    assert [(e.key, e.rank) for e in ranking][:3] == [("a", 1), ("c", 2), ("b", 3)]
    assert {e.key for e in ranking if e.rank is None} == {"d", "e"}

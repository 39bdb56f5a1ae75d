# ABOUTME: Tests grouping, band distributions, and rankings across students.
# ABOUTME: Verifies empty groups report no mean and ties share a rank.

import random

import pytest

from src.cohort.aggregation import (
    aggregate_by,
    aggregate_population,
    band_distribution,
    by_department,
    by_exam_type,
    by_semester,
    by_subject,
    rank_buckets,
    rank_entries,
)
from src.common.schemas import ScoreRecord, StudentContext


def _score(student_id, subject, marks, max_marks=100, exam_type="mid_sem"):
    return ScoreRecord(student_id, subject, exam_type, max_marks, marks)


def test_band_distribution_counts_every_defined_value_once():
    values = [95, 75, 74.9, 60, 59.9, 40, 39.9, 0, None, 120, -5]
    dist = band_distribution(values)
    assert dist == {"Excellent": 3, "Good": 2, "Average": 2, "Poor": 3}
    assert sum(dist.values()) == sum(1 for v in values if v is not None)


def test_band_distribution_totals_on_random_population():
    rng = random.Random(11)
    values = [rng.choice([None, rng.uniform(-10, 110)]) for _ in range(500)]
    dist = band_distribution(values)
    assert sum(dist.values()) == len([v for v in values if v is not None])


def test_aggregate_by_subject_means_and_exclusions():
    records = [
        _score("a", "CS101", 50),
        _score("b", "CS101", 90),
        _score("c", "CS101", 70),
        _score("a", "MA201", 30, max_marks=0),
        _score("b", "MA201", 12, max_marks=None),
        _score("a", "PH110", 18, max_marks=20),
    ]
    buckets = {b.key: b for b in aggregate_by(records, by_subject)}

    cs = buckets["CS101"]
    assert cs.count == 3
    assert cs.mean == pytest.approx(70.0)
    assert cs.highest == pytest.approx(90.0)
    assert cs.lowest == pytest.approx(50.0)
    assert cs.distribution == {"Excellent": 1, "Good": 1, "Average": 1, "Poor": 0}

    ma = buckets["MA201"]
    assert ma.count == 0
    assert ma.mean is None
    assert sum(ma.distribution.values()) == 0

    assert buckets["PH110"].mean == pytest.approx(90.0)


def test_aggregate_by_is_order_independent():
    records = [_score(s, subj, m) for s, subj, m in [("a", "X", 10), ("b", "Y", 80), ("c", "X", 55), ("d", "Y", 61)]]
    shuffled = list(records)
    random.Random(5).shuffle(shuffled)
    assert aggregate_by(records, by_subject) == aggregate_by(shuffled, by_subject)


def test_buckets_are_ordered_by_key():
    records = [_score("a", "Z", 10), _score("a", "A", 10), _score("a", "M", 10)]
    assert [b.key for b in aggregate_by(records, by_subject)] == ["A", "M", "Z"]


def test_department_and_semester_keys_use_student_context():
    contexts = [
        StudentContext("a", department_id="CSE", semester=3),
        StudentContext("b", department_id="ECE", semester=3),
        StudentContext("c", department_id="CSE", semester=5),
    ]
    records = [_score("a", "CS101", 80), _score("b", "EC101", 40), _score("c", "CS201", 60), _score("x", "CS101", 99)]

    by_dept = {b.key: b for b in aggregate_by(records, by_department(contexts))}
    assert set(by_dept) == {"CSE", "ECE"}
    assert by_dept["CSE"].mean == pytest.approx(70.0)

    by_sem = aggregate_by(records, by_semester(contexts))
    assert [b.key for b in by_sem] == [3, 5]
    assert by_sem[0].mean == pytest.approx(60.0)


def test_exam_type_grouping():
    records = [_score("a", "CS101", 80, exam_type="end_sem"), _score("a", "CS101", 40, exam_type="class_test")]
    assert [b.key for b in aggregate_by(records, by_exam_type)] == ["class_test", "end_sem"]


def test_aggregate_population_over_raw_percentages():
    bucket = aggregate_population([50.0, None, 90.0, 70.0])
    assert bucket.count == 3
    assert bucket.mean == pytest.approx(70.0)
    empty = aggregate_population([None])
    assert empty.count == 0 and empty.mean is None


def test_rank_entries_ties_share_rank():
    ranked = rank_entries([("a", 70.0), ("b", 90.0), ("c", 70.0), ("d", None), ("e", 50.0)])
    assert [(e.key, e.rank) for e in ranked] == [("b", 1), ("a", 2), ("c", 2), ("e", 4), ("d", None)]


def test_rank_buckets_leaves_empty_groups_unranked():
    records = [_score("a", "CS101", 80), _score("a", "MA201", 5, max_marks=0), _score("b", "PH110", 60)]
    ranked = rank_buckets(aggregate_by(records, by_subject))
    assert [(e.key, e.rank) for e in ranked] == [("CS101", 1), ("PH110", 2), ("MA201", None)]

# ABOUTME: Groups attendance rollups and eligibility classification.
# ABOUTME: Re-exports the aggregator, classifier, and weekly trend helpers.

from .aggregation import (
    aggregate_attendance,
    aggregate_attendance_by,
    low_attendance_students,
    weekly_attendance_trend,
)
from .classification import classify_attendance, is_below_threshold

__all__ = [
    "aggregate_attendance",
    "aggregate_attendance_by",
    "classify_attendance",
    "is_below_threshold",
    "low_attendance_students",
    "weekly_attendance_trend",
]

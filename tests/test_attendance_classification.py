# ABOUTME: Tests attendance bands and the eligibility threshold flag.
# ABOUTME: Covers the inclusive 75% boundary, finer low bands, and no-data input.

import math

import pytest

from src.attendance.classification import classify_attendance, is_below_threshold
from src.common.config import AnalyticsConfig
from src.common.schemas import AttendanceBand


@pytest.mark.parametrize(
    "pct, band, below",
    [
        (100.0, AttendanceBand.GOOD, False),
        (75.0, AttendanceBand.GOOD, False),
        (74.99, AttendanceBand.LOW, True),
        (60.0, AttendanceBand.LOW, True),
        (59.9, AttendanceBand.CRITICAL, True),
        (0.0, AttendanceBand.CRITICAL, True),
        (130.0, AttendanceBand.GOOD, False),
    ],
)
def test_classify_attendance_bands(pct, band, below):
    result = classify_attendance(pct)
    assert result.band is band
    assert result.label == band.value
    assert result.below_threshold is below


def test_severity_increases_as_attendance_drops():
    ranks = [classify_attendance(p).severity_rank for p in (95, 75, 70, 40)]
    assert ranks == sorted(ranks)


def test_no_data_is_not_classified():
    assert classify_attendance(None) is None
    assert is_below_threshold(None) is None


def test_nan_is_rejected():
    with pytest.raises(ValueError):
        classify_attendance(math.nan)


def test_threshold_is_configurable():
    cfg = AnalyticsConfig(attendance_threshold=80, attendance_critical_cut=65)
    assert is_below_threshold(75, cfg) is True
    assert classify_attendance(64, cfg).band is AttendanceBand.CRITICAL

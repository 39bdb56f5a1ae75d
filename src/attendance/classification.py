# ABOUTME: Maps attendance percentages to Good / Low / Critical bands.
# ABOUTME: Exposes the exam-eligibility threshold flag alongside the human label.

from __future__ import annotations

from typing import Optional

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import require_finite
from ..common.schemas import AttendanceBand, AttendanceClassification

_SEVERITY = {
    AttendanceBand.GOOD: 0,
    AttendanceBand.LOW: 1,
    AttendanceBand.CRITICAL: 2,
}


def classify_attendance(
    pct: Optional[float],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Optional[AttendanceClassification]:
    """
    Classify an attendance percentage against the eligibility threshold.

    ``pct >= attendance_threshold`` meets the requirement (inclusive);
    below it, ``attendance_critical_cut`` splits Low from Critical. Values
    above 100 land in the top band. ``None`` (no records) stays ``None``.
    """

    if pct is None:
        return None
    pct = require_finite(pct, "attendance percentage")

    if pct >= config.attendance_threshold:
        band = AttendanceBand.GOOD
    elif pct >= config.attendance_critical_cut:
        band = AttendanceBand.LOW
    else:
        band = AttendanceBand.CRITICAL

    return AttendanceClassification(
        label=band.value,
        severity_rank=_SEVERITY[band],
        band=band,
        below_threshold=band is not AttendanceBand.GOOD,
    )


def is_below_threshold(pct: Optional[float], config: AnalyticsConfig = DEFAULT_CONFIG) -> Optional[bool]:
    result = classify_attendance(pct, config)
    return None if result is None else result.below_threshold

# ABOUTME: Converts raw marks into 0-100 percentages consumed by every analytic.
# ABOUTME: Excludes records without a usable denominator instead of scoring them as zero.

from __future__ import annotations

import logging
import math
import numbers
from typing import Iterable, List, Optional

import numpy as np

from .schemas import ScoreRecord

logger = logging.getLogger(__name__)


def _require_number(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a real number, got {type(value).__name__}.")


def percentage(marks_obtained, max_marks) -> Optional[float]:
    """
    Return ``marks_obtained / max_marks * 100`` or ``None`` when undefined.

    ``None`` is returned for a missing, zero, negative, or non-finite
    ``max_marks`` and for non-finite ``marks_obtained``. The result is not
    clamped; marks above the maximum are an upstream data issue.
    """

    if max_marks is None or marks_obtained is None:
        return None
    _require_number(max_marks, "max_marks")
    _require_number(marks_obtained, "marks_obtained")
    if not math.isfinite(max_marks) or max_marks <= 0:
        return None
    if not math.isfinite(marks_obtained):
        return None
    return float(marks_obtained) / float(max_marks) * 100.0


def record_percentage(record: ScoreRecord) -> Optional[float]:
    value = percentage(record.marks_obtained, record.max_marks)
    if value is None:
        logger.debug(
            "Excluding score for student=%s subject=%s exam_type=%s (max_marks=%r)",
            record.student_id,
            record.subject_code,
            record.exam_type,
            record.max_marks,
        )
    return value


def valid_percentages(records: Iterable[ScoreRecord]) -> List[float]:
    """Percentages of every record with a defined value, in input order."""

    values = []
    for record in records:
        value = record_percentage(record)
        if value is not None:
            values.append(value)
    return values


def mean_percentage(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the defined values, or ``None`` for an empty population."""

    defined = [v for v in values if v is not None]
    if not defined:
        return None
    return float(np.mean(defined))


def require_finite(value, name: str = "percentage") -> float:
    """Validate a percentage handed to a classifier; NaN and non-numbers are programming errors."""

    _require_number(value, name)
    if math.isnan(value):
        raise ValueError(f"{name} is NaN.")
    return float(value)

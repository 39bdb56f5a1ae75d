# ABOUTME: Detects whether a student's chronological scores are improving or declining.
# ABOUTME: Compares the later half of the recent window against the earlier half.

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import record_percentage, require_finite
from ..common.schemas import ScoreRecord, TrendDirection, TrendResult


def detect_trend(
    percentages_oldest_first: Sequence[float],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> TrendResult:
    """
    Classify the direction of a chronologically ordered score sequence.

    Only the most recent ``config.trend_window`` points are considered. The
    window is split into an earlier and a later half (the middle point of an
    odd-length window belongs to neither). The trend is Improving when the
    later mean exceeds the earlier mean by more than ``config.trend_tolerance``
    percentage points, Declining when it falls short by more than that, and
    Stable otherwise. Fewer than two points is Stable.

    The caller owns ordering; use ``detect_trend_from_records`` to sort by date.
    """

    values = [require_finite(v, "score percentage") for v in percentages_oldest_first]
    if config.trend_window is not None:
        values = values[-config.trend_window :]
    if len(values) < 2:
        return TrendResult(direction=TrendDirection.STABLE)

    half = len(values) // 2
    earlier_mean = float(np.mean(values[:half]))
    later_mean = float(np.mean(values[-half:]))
    delta = later_mean - earlier_mean

    if delta > config.trend_tolerance:
        direction = TrendDirection.IMPROVING
    elif delta < -config.trend_tolerance:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE
    return TrendResult(direction=direction, earlier_mean=earlier_mean, later_mean=later_mean)


def chronological_percentages(records: Iterable[ScoreRecord]) -> List[float]:
    """
    Valid percentages ordered oldest first.

    Records are sorted by ``exam_date`` with a stable sort; undated records
    keep their input order after the dated ones.
    """

    indexed = [(i, r) for i, r in enumerate(records)]
    indexed.sort(key=lambda item: _date_sort_key(item[1].exam_date, item[0]))
    values = []
    for _, record in indexed:
        value = record_percentage(record)
        if value is not None:
            values.append(value)
    return values


def detect_trend_from_records(
    records: Iterable[ScoreRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> TrendResult:
    return detect_trend(chronological_percentages(records), config)


def _date_sort_key(exam_date: Optional[date], position: int):
    if exam_date is None:
        return (1, date.min, position)
    return (0, exam_date, position)

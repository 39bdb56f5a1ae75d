# ABOUTME: Reduces attendance records into status counts and attended percentages.
# ABOUTME: Provides per-key, per-student, and weekly rollups used by attendance reports.

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.schemas import AttendanceRecord, AttendanceStatus, AttendanceSummary

logger = logging.getLogger(__name__)


def aggregate_attendance(
    records: Iterable[AttendanceRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> AttendanceSummary:
    """
    Count statuses in a single pass and compute the attended percentage.

    Statuses listed in ``config.attended_statuses`` (present and late) count
    as attended. An empty input yields ``percentage=None``, which callers
    render as "no data" rather than 0%. Duplicates are counted as given.
    """

    counts = {status: 0 for status in AttendanceStatus}
    for record in records:
        counts[AttendanceStatus.parse(record.status)] += 1

    total = sum(counts.values())
    attended = sum(count for status, count in counts.items() if status.value in config.attended_statuses)
    pct = attended / total * 100.0 if total > 0 else None
    return AttendanceSummary(
        total=total,
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        excused=counts[AttendanceStatus.EXCUSED],
        percentage=pct,
    )


def aggregate_attendance_by(
    records: Iterable[AttendanceRecord],
    key_fn: Callable[[AttendanceRecord], Optional[Hashable]],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Dict[Hashable, AttendanceSummary]:
    """Group records by ``key_fn`` and summarize each group; ``None`` keys are skipped."""

    groups: Dict[Hashable, List[AttendanceRecord]] = defaultdict(list)
    skipped = 0
    for record in records:
        key = key_fn(record)
        if key is None:
            skipped += 1
            continue
        groups[key].append(record)
    if skipped:
        logger.debug("Skipped %d attendance records without a group key", skipped)
    return {key: aggregate_attendance(group, config) for key, group in groups.items()}


def low_attendance_students(
    records: Iterable[AttendanceRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
    limit: Optional[int] = None,
) -> List[Tuple[Tuple[str, str], AttendanceSummary]]:
    """
    Return ``((student_id, subject_code), summary)`` pairs below the threshold.

    Worst attendance first; ties ordered by student then subject.
    """

    per_pair = aggregate_attendance_by(records, lambda r: (r.student_id, r.subject_code), config)
    below = [
        (key, summary)
        for key, summary in per_pair.items()
        if summary.percentage is not None and summary.percentage < config.attendance_threshold
    ]
    below.sort(key=lambda item: (item[1].percentage, item[0]))
    if limit is not None:
        below = below[:limit]
    return below


def week_start(day: date) -> date:
    """Sunday that opens the week containing ``day``."""

    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_attendance_trend(
    records: Iterable[AttendanceRecord],
    weeks: Optional[int] = 12,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[Tuple[date, AttendanceSummary]]:
    """Chronological weekly summaries, keeping only the most recent ``weeks`` buckets."""

    by_week = aggregate_attendance_by(records, lambda r: week_start(r.date), config)
    ordered = sorted(by_week.items(), key=lambda item: item[0])
    if weeks is not None:
        ordered = ordered[-weeks:] if weeks > 0 else []
    return ordered

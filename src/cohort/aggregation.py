# ABOUTME: Groups exam percentages by department, semester, subject, or exam type.
# ABOUTME: Computes per-group means, band distributions, and tie-aware rankings.

from __future__ import annotations

import logging
from collections import OrderedDict
from numbers import Number
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import record_percentage
from ..common.schemas import AggregateBucket, LearnerBand, RankedEntry, ScoreRecord, StudentContext, StudentProfile
from ..performance.classification import learner_band

logger = logging.getLogger(__name__)

KeyFn = Callable[[ScoreRecord], Optional[Hashable]]


def band_distribution(
    percentages: Iterable[Optional[float]],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Dict[str, int]:
    """
    Count percentages per learner band; ``None`` values are not counted.

    The four counts always sum to the number of defined percentages.
    """

    counts = OrderedDict((band.value, 0) for band in LearnerBand)
    for value in percentages:
        if value is None:
            continue
        counts[learner_band(value, config).value] += 1
    return dict(counts)


def aggregate_by(
    records: Iterable[ScoreRecord],
    key_fn: KeyFn,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[AggregateBucket]:
    """
    Group records by ``key_fn`` and summarize the valid percentages per group.

    A group whose records all lack a percentage is still reported, with
    ``count=0`` and ``mean=None``. Records whose key is ``None`` are skipped.
    Buckets are ordered by key.
    """

    groups: Dict[Hashable, List[float]] = {}
    skipped = 0
    for record in records:
        key = key_fn(record)
        if key is None:
            skipped += 1
            continue
        values = groups.setdefault(key, [])
        value = record_percentage(record)
        if value is not None:
            values.append(value)
    if skipped:
        logger.debug("Skipped %d score records without a group key", skipped)

    return [_bucket(key, groups[key], config) for key in sorted(groups, key=_key_order)]


def aggregate_population(
    percentages: Iterable[Optional[float]],
    key: Hashable = "all",
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> AggregateBucket:
    """Single bucket over an arbitrary population of percentages."""

    return _bucket(key, [v for v in percentages if v is not None], config)


def rank_entries(entries: Iterable[Tuple[Hashable, Optional[float]]]) -> List[RankedEntry]:
    """
    Rank ``(key, mean)`` pairs by mean, highest first.

    Equal means share a rank and the next rank skips ahead ("1, 1, 3").
    Entries without a mean are appended unranked.
    """

    entries = list(entries)
    scored = sorted((e for e in entries if e[1] is not None), key=lambda e: (-e[1], _key_order(e[0])))
    unscored = sorted((e for e in entries if e[1] is None), key=lambda e: _key_order(e[0]))

    ranked: List[RankedEntry] = []
    previous_mean = None
    previous_rank = 0
    for position, (key, mean) in enumerate(scored, start=1):
        rank = previous_rank if mean == previous_mean else position
        ranked.append(RankedEntry(key=key, mean=mean, rank=rank))
        previous_mean, previous_rank = mean, rank
    ranked.extend(RankedEntry(key=key, mean=None, rank=None) for key, _ in unscored)
    return ranked


def rank_buckets(buckets: Iterable[AggregateBucket]) -> List[RankedEntry]:
    return rank_entries((b.key, b.mean if b.count > 0 else None) for b in buckets)


def rank_profiles(profiles: Iterable[StudentProfile]) -> List[RankedEntry]:
    return rank_entries((p.student_id, p.average) for p in profiles)


def by_subject(record: ScoreRecord) -> str:
    return record.subject_code


def by_exam_type(record: ScoreRecord) -> str:
    return record.exam_type


def by_student(record: ScoreRecord) -> str:
    return record.student_id


def by_department(contexts: Iterable[StudentContext]) -> KeyFn:
    lookup = {c.student_id: c.department_id for c in contexts}
    return lambda record: lookup.get(record.student_id)


def by_semester(contexts: Iterable[StudentContext]) -> KeyFn:
    lookup = {c.student_id: c.semester for c in contexts}
    return lambda record: lookup.get(record.student_id)


def by_batch(contexts: Iterable[StudentContext]) -> KeyFn:
    lookup = {c.student_id: c.batch for c in contexts}
    return lambda record: lookup.get(record.student_id)


GROUPINGS: Mapping[str, Callable[[Iterable[StudentContext]], KeyFn]] = {
    "subject": lambda contexts: by_subject,
    "exam-type": lambda contexts: by_exam_type,
    "student": lambda contexts: by_student,
    "department": by_department,
    "semester": by_semester,
    "batch": by_batch,
}


def _bucket(key: Hashable, values: List[float], config: AnalyticsConfig) -> AggregateBucket:
    if not values:
        return AggregateBucket(key=key, count=0, mean=None, distribution=band_distribution((), config))
    arr = np.asarray(values, dtype=float)
    return AggregateBucket(
        key=key,
        count=len(values),
        mean=float(arr.mean()),
        distribution=band_distribution(values, config),
        highest=float(arr.max()),
        lowest=float(arr.min()),
    )


def _key_order(key):
    if isinstance(key, Number) and not isinstance(key, bool):
        return (0, key, "")
    if isinstance(key, tuple):
        return (2, 0, tuple(str(part) for part in key))
    return (1, 0, str(key))

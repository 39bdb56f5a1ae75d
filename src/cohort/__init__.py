# ABOUTME: Groups cross-student aggregation, exam analysis, and report frames.
# ABOUTME: Re-exports grouping, distribution, and ranking entrypoints.

from .aggregation import (
    GROUPINGS,
    aggregate_by,
    aggregate_population,
    band_distribution,
    rank_buckets,
    rank_entries,
    rank_profiles,
)
from .exam_analysis import analyze_exams

__all__ = [
    "GROUPINGS",
    "aggregate_by",
    "aggregate_population",
    "analyze_exams",
    "band_distribution",
    "rank_buckets",
    "rank_entries",
    "rank_profiles",
]

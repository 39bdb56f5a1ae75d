# ABOUTME: Classifies a student's average percentage into the four learner bands.
# ABOUTME: Derives the Fast / Average / Slow summary view from the same band table.

from __future__ import annotations

from typing import Dict, Optional

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import require_finite
from ..common.schemas import ClassificationResult, LearnerBand, LearnerSummary

# Higher rank means weaker performance; used for sorting and coloring.
SEVERITY_RANKS: Dict[LearnerBand, int] = {
    LearnerBand.EXCELLENT: 0,
    LearnerBand.GOOD: 1,
    LearnerBand.AVERAGE: 2,
    LearnerBand.POOR: 3,
}

_SUMMARY_VIEW: Dict[LearnerBand, LearnerSummary] = {
    LearnerBand.EXCELLENT: LearnerSummary.FAST,
    LearnerBand.GOOD: LearnerSummary.AVERAGE,
    LearnerBand.AVERAGE: LearnerSummary.AVERAGE,
    LearnerBand.POOR: LearnerSummary.SLOW,
}


def learner_band(pct: float, config: AnalyticsConfig = DEFAULT_CONFIG) -> LearnerBand:
    """Band for a defined percentage; out-of-range values fall into the nearest band."""

    if pct >= config.excellent_cut:
        return LearnerBand.EXCELLENT
    if pct >= config.good_cut:
        return LearnerBand.GOOD
    if pct >= config.pass_cut:
        return LearnerBand.AVERAGE
    return LearnerBand.POOR


def classify_learner(
    average: Optional[float],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Optional[ClassificationResult]:
    """
    Classify an average percentage with the canonical four-band table.

    Returns ``None`` when the student has no valid scores, which is distinct
    from a 0% average (classified Poor).
    """

    if average is None:
        return None
    band = learner_band(require_finite(average, "average percentage"), config)
    return ClassificationResult(label=band.value, severity_rank=SEVERITY_RANKS[band], band=band)


def summarize_learner(result: Optional[ClassificationResult]) -> Optional[LearnerSummary]:
    """Re-bucket a four-band result into the two-cut summary widget's categories."""

    if result is None:
        return None
    return _SUMMARY_VIEW[result.band]

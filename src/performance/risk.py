# ABOUTME: Combines a student's average and trend direction into a risk level.
# ABOUTME: A passing average is always Safe; a failing, declining one is High Risk.

from __future__ import annotations

from typing import Dict, Optional

from ..common.config import DEFAULT_CONFIG, AnalyticsConfig
from ..common.normalization import require_finite
from ..common.schemas import RiskLevel, RiskResult, TrendDirection

RISK_SEVERITY: Dict[RiskLevel, int] = {
    RiskLevel.SAFE: 0,
    RiskLevel.AT_RISK: 1,
    RiskLevel.HIGH_RISK: 2,
}


def predict_risk(
    average: Optional[float],
    trend: TrendDirection,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Optional[RiskResult]:
    """
    Map (average, trend) to Safe / At Risk / High Risk.

    Averages at or above ``config.pass_cut`` are Safe for every trend. Below
    it, a Declining trend escalates to High Risk and any other trend is At
    Risk. ``None`` (no scores) yields ``None``.
    """

    if average is None:
        return None
    average = require_finite(average, "average percentage")
    direction = TrendDirection(trend)

    if average >= config.pass_cut:
        level = RiskLevel.SAFE
    elif direction is TrendDirection.DECLINING:
        level = RiskLevel.HIGH_RISK
    else:
        level = RiskLevel.AT_RISK
    return RiskResult(level=level, severity_rank=RISK_SEVERITY[level])

# ABOUTME: Tests risk prediction from average and trend direction.
# ABOUTME: Ensures passing averages are always safe and declines escalate failing ones.

import pytest

from src.common.config import AnalyticsConfig
from src.common.schemas import RiskLevel, TrendDirection
from src.performance.risk import predict_risk


def test_declining_failing_average_is_highest_severity():
    high = predict_risk(30, TrendDirection.DECLINING)
    at_risk = predict_risk(30, TrendDirection.IMPROVING)
    safe = predict_risk(80, TrendDirection.DECLINING)
    assert high.level is RiskLevel.HIGH_RISK
    assert at_risk.level is RiskLevel.AT_RISK
    assert safe.level is RiskLevel.SAFE
    assert high.severity_rank > at_risk.severity_rank > safe.severity_rank


@pytest.mark.parametrize("trend", list(TrendDirection))
def test_passing_average_is_safe_for_any_trend(trend):
    assert predict_risk(40, trend).level is RiskLevel.SAFE
    assert predict_risk(70, trend).level is RiskLevel.SAFE


def test_stable_failing_average_is_at_risk():
    assert predict_risk(39.9, TrendDirection.STABLE).level is RiskLevel.AT_RISK


def test_trend_accepts_label_strings():
    assert predict_risk(10, "Declining").level is RiskLevel.HIGH_RISK
    with pytest.raises(ValueError):
        predict_risk(10, "Sideways")


def test_no_average_has_no_risk():
    assert predict_risk(None, TrendDirection.DECLINING) is None


def test_pass_cut_comes_from_config():
    cfg = AnalyticsConfig(pass_cut=50)
    assert predict_risk(45, TrendDirection.STABLE, cfg).level is RiskLevel.AT_RISK

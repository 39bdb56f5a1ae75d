# ABOUTME: Makes the shared common package importable across analytics packages.
# ABOUTME: Re-exports schema types, configuration, and percentage helpers for convenience.

from .config import DEFAULT_CONFIG, AnalyticsConfig, load_config
from .normalization import mean_percentage, percentage, record_percentage, valid_percentages
from .schemas import (
    AggregateBucket,
    AttendanceRecord,
    AttendanceStatus,
    ClassificationResult,
    RiskLevel,
    RiskResult,
    ScoreRecord,
    StudentContext,
    TrendDirection,
    TrendResult,
)

__all__ = [
    "AggregateBucket",
    "AnalyticsConfig",
    "AttendanceRecord",
    "AttendanceStatus",
    "ClassificationResult",
    "DEFAULT_CONFIG",
    "RiskLevel",
    "RiskResult",
    "ScoreRecord",
    "StudentContext",
    "TrendDirection",
    "TrendResult",
    "load_config",
    "mean_percentage",
    "percentage",
    "record_percentage",
    "valid_percentages",
]

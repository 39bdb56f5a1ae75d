# ABOUTME: Holds the named thresholds that drive every classification and trend rule.
# ABOUTME: Loads overrides from YAML into an immutable config passed to the engine.

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Tuple

import yaml

from .schemas import AttendanceStatus

ATTENDANCE_THRESHOLD = 75.0
ATTENDANCE_CRITICAL_CUT = 60.0
EXCELLENT_CUT = 75.0
GOOD_CUT = 60.0
PASS_CUT = 40.0
TREND_TOLERANCE = 5.0
TREND_WINDOW = 5
ATTENDED_STATUSES = ("present", "late")
NUMERIC_FIELDS = (
    "attendance_threshold",
    "attendance_critical_cut",
    "excellent_cut",
    "good_cut",
    "pass_cut",
    "trend_tolerance",
)


@dataclass(frozen=True)
class AnalyticsConfig:
    """Thresholds shared by the attendance, performance, and cohort packages."""

    attendance_threshold: float = ATTENDANCE_THRESHOLD
    attendance_critical_cut: float = ATTENDANCE_CRITICAL_CUT
    excellent_cut: float = EXCELLENT_CUT
    good_cut: float = GOOD_CUT
    pass_cut: float = PASS_CUT
    trend_tolerance: float = TREND_TOLERANCE
    trend_window: Optional[int] = TREND_WINDOW
    attended_statuses: Tuple[str, ...] = ATTENDED_STATUSES

    def __post_init__(self) -> None:
        for name in NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}.")
        window = self.trend_window
        if window is not None and (isinstance(window, bool) or not isinstance(window, int)):
            raise ValueError(f"trend_window must be an integer or null, got {window!r}.")
        if isinstance(self.attended_statuses, str) or not isinstance(self.attended_statuses, (list, tuple)):
            raise ValueError(f"attended_statuses must be a list of statuses, got {self.attended_statuses!r}.")

        if not self.pass_cut < self.good_cut < self.excellent_cut:
            raise ValueError(
                f"Learner cut points must ascend: pass_cut={self.pass_cut}, "
                f"good_cut={self.good_cut}, excellent_cut={self.excellent_cut}."
            )
        if not self.attendance_critical_cut < self.attendance_threshold:
            raise ValueError(
                f"attendance_critical_cut ({self.attendance_critical_cut}) must be below "
                f"attendance_threshold ({self.attendance_threshold})."
            )
        if self.trend_tolerance < 0:
            raise ValueError("trend_tolerance must be non-negative.")
        if self.trend_window is not None and self.trend_window < 2:
            raise ValueError("trend_window must be at least 2 or null.")
        object.__setattr__(self, "attended_statuses", tuple(AttendanceStatus.parse(s).value for s in self.attended_statuses))

    @property
    def learner_cuts(self) -> Tuple[float, float, float]:
        return (self.pass_cut, self.good_cut, self.excellent_cut)


DEFAULT_CONFIG = AnalyticsConfig()


def load_config(config_path: Path, base: AnalyticsConfig = DEFAULT_CONFIG) -> AnalyticsConfig:
    """
    Read the ``analytics`` section of a YAML file on top of ``base``.

    Missing keys keep their base values; unknown keys are rejected so a typo
    never silently falls back to a default threshold.
    """

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}

    section = cfg.get("analytics", cfg)
    if not isinstance(section, dict):
        raise ValueError(f"Expected a mapping under 'analytics' in {config_path}.")

    known = {f.name for f in fields(AnalyticsConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown analytics config keys: {', '.join(unknown)}.")

    return replace(base, **section)

# ABOUTME: Groups per-student performance analytics.
# ABOUTME: Re-exports learner classification, trend detection, risk prediction, and profiles.

from .classification import classify_learner, learner_band, summarize_learner
from .profile import build_cohort_profiles, build_student_profile, summarize_profiles
from .risk import predict_risk
from .trend import detect_trend, detect_trend_from_records

__all__ = [
    "build_cohort_profiles",
    "build_student_profile",
    "classify_learner",
    "detect_trend",
    "detect_trend_from_records",
    "learner_band",
    "predict_risk",
    "summarize_learner",
    "summarize_profiles",
]

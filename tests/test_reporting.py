# ABOUTME: Tests DataFrame report builders over engine results.
# ABOUTME: Ensures missing values stay missing and rankings order the rows.

import pandas as pd

from src.cohort.aggregation import aggregate_by, by_subject, rank_buckets
from src.cohort.reporting import buckets_to_frame, format_percentage, profiles_to_frame
from src.common.schemas import ScoreRecord
from src.performance.profile import build_cohort_profiles


def _records():
    return [
        ScoreRecord("a", "CS101", "mid_sem", 100, 55),
        ScoreRecord("b", "MA201", "mid_sem", 100, 85),
        ScoreRecord("c", "PH110", "mid_sem", 0, 10),
    ]


def test_buckets_to_frame_with_ranking():
    buckets = aggregate_by(_records(), by_subject)
    df = buckets_to_frame(buckets, rank_buckets(buckets))
    assert df["key"].tolist() == ["MA201", "CS101", "PH110"]
    assert df["rank"].iloc[0] == 1
    assert pd.isna(df["rank"].iloc[2])
    assert pd.isna(df["mean"].iloc[2])
    assert df.loc[df["key"] == "MA201", "Excellent"].iloc[0] == 1


def test_empty_frames_keep_columns():
    df = buckets_to_frame([])
    assert "mean" in df.columns and df.empty
    assert profiles_to_frame([]).empty


def test_profiles_to_frame_marks_no_data():
    df = profiles_to_frame(build_cohort_profiles(_records()))
    row = df[df["student_id"] == "c"].iloc[0]
    assert pd.isna(row["classification"])
    assert pd.isna(row["average"])
    assert row["trend"] == "Stable"


def test_format_percentage():
    assert format_percentage(70) == "70.0%"
    assert format_percentage(None) == "-"
    assert format_percentage(float("nan")) == "-"

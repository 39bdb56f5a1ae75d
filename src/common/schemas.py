# ABOUTME: Defines canonical data structures shared by the analytics packages.
# ABOUTME: Centralizes score, attendance, classification, and aggregate schemas.

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Hashable, Optional, Tuple


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"

    @classmethod
    def parse(cls, value) -> "AttendanceStatus":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Attendance status must be a string, got {type(value).__name__}.")
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            expected = ", ".join(s.value for s in cls)
            raise ValueError(f"Unsupported attendance status '{value}'. Expected one of: {expected}.") from exc


class LearnerBand(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    POOR = "Poor"


class LearnerSummary(str, Enum):
    FAST = "Fast Learner"
    AVERAGE = "Average Learner"
    SLOW = "Slow Learner"


class AttendanceBand(str, Enum):
    GOOD = "Good"
    LOW = "Low"
    CRITICAL = "Critical"


class TrendDirection(str, Enum):
    IMPROVING = "Improving"
    DECLINING = "Declining"
    STABLE = "Stable"


class RiskLevel(str, Enum):
    SAFE = "Safe"
    AT_RISK = "At Risk"
    HIGH_RISK = "High Risk"


@dataclass(frozen=True)
class ScoreRecord:
    """One student's marks on one exam, as supplied by the record store."""

    student_id: str
    subject_code: str
    exam_type: str
    max_marks: Optional[float]
    marks_obtained: float
    exam_date: Optional[date] = None
    exam_id: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance mark for a (student, subject, date)."""

    student_id: str
    subject_code: str
    date: date
    status: AttendanceStatus

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", AttendanceStatus.parse(self.status))


@dataclass(frozen=True)
class StudentContext:
    """Grouping keys for a student; never read by classification logic."""

    student_id: str
    department_id: Optional[str] = None
    semester: Optional[int] = None
    batch: Optional[str] = None


@dataclass(frozen=True)
class ClassificationResult:
    label: str
    severity_rank: int
    band: LearnerBand


@dataclass(frozen=True)
class AttendanceClassification:
    label: str
    severity_rank: int
    band: AttendanceBand
    below_threshold: bool


@dataclass(frozen=True)
class TrendResult:
    direction: TrendDirection
    earlier_mean: Optional[float] = None
    later_mean: Optional[float] = None


@dataclass(frozen=True)
class RiskResult:
    level: RiskLevel
    severity_rank: int


@dataclass(frozen=True)
class AttendanceSummary:
    total: int
    present: int
    absent: int
    late: int
    excused: int
    percentage: Optional[float]

    @property
    def attended(self) -> int:
        return self.present + self.late


@dataclass(frozen=True)
class AggregateBucket:
    key: Hashable
    count: int
    mean: Optional[float]
    distribution: Dict[str, int] = field(default_factory=dict)
    highest: Optional[float] = None
    lowest: Optional[float] = None


@dataclass(frozen=True)
class RankedEntry:
    key: Hashable
    mean: Optional[float]
    rank: Optional[int]


@dataclass(frozen=True)
class ExamSummary:
    exam_key: Hashable
    subject_code: str
    exam_type: str
    exam_date: Optional[date]
    max_marks: Optional[float]
    students: int
    mean_percentage: Optional[float]
    highest_marks: Optional[float]
    lowest_marks: Optional[float]
    pass_rate: Optional[float]


@dataclass(frozen=True)
class StudentProfile:
    """Per-student analytics assembled from marks and attendance."""

    student_id: str
    exam_count: int
    average: Optional[float]
    classification: Optional[ClassificationResult]
    summary: Optional[LearnerSummary]
    trend: TrendResult
    risk: Optional[RiskResult]
    attendance: AttendanceSummary
    attendance_classification: Optional[AttendanceClassification]
    recent_scores: Tuple[float, ...] = ()


@dataclass(frozen=True)
class CohortSummary:
    total_students: int
    band_counts: Dict[str, int]
    summary_counts: Dict[str, int]
    improving: int
    declining: int
    at_risk: int
    no_data: int
    low_attendance: int

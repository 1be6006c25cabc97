"""
Student metric snapshots and risk factor sets used by the scoring engine.
"""
import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Mapping

logger = logging.getLogger("app.scoring")

MAX_PERCENT = 100.0
MAX_CGPA = 10.0


class RiskLevel(str, Enum):
    """Coarse risk classification."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class FeePaymentStatus(str, Enum):
    """Fee payment state of a student."""

    CURRENT = "current"
    DELAYED = "delayed"
    OVERDUE = "overdue"


def clamp(value: float, lower: float = 0.0, upper: float = MAX_PERCENT) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def parse_fee_status(value: Any) -> FeePaymentStatus:
    """
    Parse a fee payment status.

    Unknown values are treated as current, matching how the formulas
    fall through to their "current" branch.
    """
    if isinstance(value, FeePaymentStatus):
        return value
    try:
        return FeePaymentStatus(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown fee payment status {value!r}, treating as current")
        return FeePaymentStatus.CURRENT


@dataclass(frozen=True)
class StudentMetrics:
    """
    Immutable snapshot of the metrics the scoring formulas read.

    Percentages are on a 0-100 scale, cgpa on 0-10. Use from_record() to
    build a snapshot from a raw record; it clamps every field into range.
    """

    cgpa: float
    assignment_completion_rate: float
    test_score_average: float
    attendance_rate: float
    total_absences: float = 0
    tardiness_count: float = 0
    login_frequency: float = 0
    class_participation_score: float = 0
    challenge_completion_rate: float = 0
    fee_payment_status: FeePaymentStatus = FeePaymentStatus.CURRENT
    has_scholarship: bool = False
    current_streak: float = 0
    longest_streak: float = 0

    @property
    def cgpa_ratio(self) -> float:
        """CGPA normalized to 0-1."""
        return self.cgpa / MAX_CGPA

    @property
    def streak_ratio(self) -> float:
        """Current streak over longest streak, 0 when there is no longest streak."""
        if not self.longest_streak:
            return 0.0
        return self.current_streak / self.longest_streak

    @property
    def is_fee_current(self) -> bool:
        return self.fee_payment_status == FeePaymentStatus.CURRENT

    @classmethod
    def from_record(cls, record: Any) -> "StudentMetrics":
        """
        Build a clamped snapshot from a mapping or an object with metric attributes.

        Args:
            record: Student row, pydantic model or dict

        Returns:
            StudentMetrics with every field in its expected domain
        """
        if isinstance(record, Mapping):
            get = lambda name, default=0: record.get(name, default)  # noqa: E731
        else:
            get = lambda name, default=0: getattr(record, name, default)  # noqa: E731

        def number(name: str) -> float:
            value = get(name)
            return float(value) if value is not None else 0.0

        return cls(
            cgpa=clamp(number("cgpa"), 0.0, MAX_CGPA),
            assignment_completion_rate=clamp(number("assignment_completion_rate")),
            test_score_average=clamp(number("test_score_average")),
            attendance_rate=clamp(number("attendance_rate")),
            total_absences=max(0.0, number("total_absences")),
            tardiness_count=max(0.0, number("tardiness_count")),
            login_frequency=max(0.0, number("login_frequency")),
            class_participation_score=clamp(number("class_participation_score")),
            challenge_completion_rate=clamp(number("challenge_completion_rate")),
            fee_payment_status=parse_fee_status(get("fee_payment_status", FeePaymentStatus.CURRENT.value)),
            has_scholarship=bool(get("has_scholarship", False)),
            current_streak=max(0.0, number("current_streak")),
            longest_streak=max(0.0, number("longest_streak")),
        )


@dataclass(frozen=True)
class RiskFactorSet:
    """Five risk sub-scores, higher means more risk."""

    academic: float
    attendance: float
    engagement: float
    financial: float
    social: float

    def clamped(self) -> "RiskFactorSet":
        return RiskFactorSet(
            academic=clamp(self.academic),
            attendance=clamp(self.attendance),
            engagement=clamp(self.engagement),
            financial=clamp(self.financial),
            social=clamp(self.social),
        )

    def blend(self, other: "RiskFactorSet", ratio: float, other_ratio: float) -> "RiskFactorSet":
        """Blend factor by factor: self * ratio + other * other_ratio."""
        return RiskFactorSet(
            academic=self.academic * ratio + other.academic * other_ratio,
            attendance=self.attendance * ratio + other.attendance * other_ratio,
            engagement=self.engagement * ratio + other.engagement * other_ratio,
            financial=self.financial * ratio + other.financial * other_ratio,
            social=self.social * ratio + other.social * other_ratio,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

"""
Dropout risk algorithms.

Four hand-tuned closed-form formulas map a StudentMetrics snapshot to five
risk factors and an aggregate 0-100 score:

- Rule-Based: fixed weighted sum
- ML-Inspired: non-linear penalties with dynamic weights
- Holistic: equal weights with compound interaction multiplier
- ML + Holistic: 60/40 blend of the two above, the primary algorithm

Every function is pure: identical metrics always give identical results.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from app.scoring.metrics import FeePaymentStatus, RiskFactorSet, RiskLevel, StudentMetrics, clamp

RULE_BASED = "rule_based"
ML_BASED = "ml_based"
HOLISTIC = "holistic"
ML_HOLISTIC = "ml_holistic"

ALGORITHM_NAMES = {
    RULE_BASED: "Rule-Based",
    ML_BASED: "ML-Inspired",
    HOLISTIC: "Holistic",
    ML_HOLISTIC: "ML + Holistic",
}

# (moderate_at, high_at): score < moderate_at is low, < high_at is moderate
RULE_BASED_THRESHOLDS = (30.0, 60.0)
ML_BASED_THRESHOLDS = (35.0, 65.0)
HOLISTIC_THRESHOLDS = (33.0, 66.0)
ML_HOLISTIC_THRESHOLDS = ML_BASED_THRESHOLDS

RULE_BASED_WEIGHTS = {
    "academic": 0.35,
    "attendance": 0.25,
    "engagement": 0.20,
    "financial": 0.10,
    "social": 0.10,
}
HOLISTIC_WEIGHT = 0.20

RULE_FINANCIAL = {FeePaymentStatus.OVERDUE: 80.0, FeePaymentStatus.DELAYED: 50.0, FeePaymentStatus.CURRENT: 20.0}
ML_FINANCIAL = {FeePaymentStatus.OVERDUE: 85.0, FeePaymentStatus.DELAYED: 55.0, FeePaymentStatus.CURRENT: 15.0}
HOLISTIC_FINANCIAL = {FeePaymentStatus.OVERDUE: 75.0, FeePaymentStatus.DELAYED: 45.0, FeePaymentStatus.CURRENT: 20.0}
HOLISTIC_SCHOLARSHIP_FINANCIAL = 10.0

# ML-inspired penalty curves
ML_CGPA_PENALTY_BELOW = 0.5
ML_ATTENDANCE_PENALTY_BELOW = 75.0
ML_PARTICIPATION_PENALTY_BELOW = 50.0
ML_LOGIN_EXPONENT = 0.8

# Dynamic weights: (boosted, base) for the largest of academic/attendance/engagement
DYNAMIC_WEIGHTS = {
    "academic": (0.40, 0.30),
    "attendance": (0.35, 0.25),
    "engagement": (0.25, 0.20),
}
FIXED_WEIGHTS = {"financial": 0.10, "social": 0.10}

# Compound interaction terms
COMPOUND_TRIGGER = 60.0
COMPOUND_ACADEMIC_FINANCIAL_TRIGGER = 50.0
COMPOUND_ACADEMIC_ATTENDANCE = 0.15
COMPOUND_ACADEMIC_ENGAGEMENT = 0.15
COMPOUND_ATTENDANCE_ENGAGEMENT = 0.10
COMPOUND_FINANCIAL_ACADEMIC = 0.10

ML_BLEND = 0.6
HOLISTIC_BLEND = 0.4


@dataclass(frozen=True)
class AlgorithmResult:
    """Output of one algorithm for one snapshot."""

    algorithm: str
    risk_score: float
    risk_level: RiskLevel
    factors: RiskFactorSet
    compound_multiplier: Optional[float] = None
    algorithm_name: str = field(default="")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "algorithm": self.algorithm,
            "algorithm_name": self.algorithm_name or ALGORITHM_NAMES.get(self.algorithm, self.algorithm),
            "risk_score": self.risk_score,
            "risk_level": self.risk_level.value,
            "factors": self.factors.to_dict(),
        }
        if self.compound_multiplier is not None:
            data["compound_multiplier"] = self.compound_multiplier
        return data


def classify(score: float, thresholds: Tuple[float, float]) -> RiskLevel:
    """
    Classify a score into a risk level.

    Args:
        score: Risk score (0-100)
        thresholds: (moderate_at, high_at) pair

    Returns:
        RiskLevel
    """
    moderate_at, high_at = thresholds
    if score < moderate_at:
        return RiskLevel.LOW
    if score < high_at:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def pick_weights(factors: RiskFactorSet) -> Dict[str, float]:
    """
    Pick factor weights, boosting whichever of academic/attendance/engagement is largest.

    Every factor tied for the maximum gets its boosted weight.
    """
    max_risk = max(factors.academic, factors.attendance, factors.engagement)
    weights = {}
    for name, (boosted, base) in DYNAMIC_WEIGHTS.items():
        weights[name] = boosted if getattr(factors, name) == max_risk else base
    weights.update(FIXED_WEIGHTS)
    return weights


def weighted_sum(factors: RiskFactorSet, weights: Dict[str, float]) -> float:
    return sum(getattr(factors, name) * weight for name, weight in weights.items())


def compound_multiplier(factors: RiskFactorSet, financial_pressure: bool) -> float:
    """
    Interaction multiplier for jointly elevated risk factors.

    Args:
        factors: Factor set to check
        financial_pressure: Whether the financial/academic term applies

    Returns:
        Multiplier >= 1.0
    """
    multiplier = 1.0
    if factors.academic > COMPOUND_TRIGGER and factors.attendance > COMPOUND_TRIGGER:
        multiplier += COMPOUND_ACADEMIC_ATTENDANCE
    if factors.academic > COMPOUND_TRIGGER and factors.engagement > COMPOUND_TRIGGER:
        multiplier += COMPOUND_ACADEMIC_ENGAGEMENT
    if factors.attendance > COMPOUND_TRIGGER and factors.engagement > COMPOUND_TRIGGER:
        multiplier += COMPOUND_ATTENDANCE_ENGAGEMENT
    if financial_pressure:
        multiplier += COMPOUND_FINANCIAL_ACADEMIC
    return multiplier


def rule_based_factors(metrics: StudentMetrics) -> RiskFactorSet:
    return RiskFactorSet(
        academic=100 - (metrics.cgpa_ratio * 25
                        + metrics.assignment_completion_rate * 0.35
                        + metrics.test_score_average * 0.40),
        attendance=100 - metrics.attendance_rate,
        engagement=100 - ((metrics.login_frequency / 7) * 30
                          + metrics.class_participation_score * 0.5
                          + metrics.challenge_completion_rate * 0.2),
        financial=RULE_FINANCIAL[metrics.fee_payment_status],
        social=100 - metrics.class_participation_score,
    )


def ml_factors(metrics: StudentMetrics) -> RiskFactorSet:
    cgpa_ratio = metrics.cgpa_ratio
    if cgpa_ratio < ML_CGPA_PENALTY_BELOW:
        academic = 90 + (ML_CGPA_PENALTY_BELOW - cgpa_ratio) * 20
    else:
        academic = 100 - (cgpa_ratio * 60
                          + metrics.assignment_completion_rate * 0.2
                          + metrics.test_score_average * 0.2)

    attendance = 100 - metrics.attendance_rate
    if metrics.attendance_rate < ML_ATTENDANCE_PENALTY_BELOW:
        attendance += (ML_ATTENDANCE_PENALTY_BELOW - metrics.attendance_rate) * 0.5

    engagement = 100 - (math.pow(metrics.login_frequency / 7, ML_LOGIN_EXPONENT) * 30
                        + metrics.class_participation_score * 0.4
                        + math.sqrt(metrics.challenge_completion_rate) * 3)

    social = 100 - metrics.class_participation_score
    if metrics.class_participation_score < ML_PARTICIPATION_PENALTY_BELOW:
        social += 10

    return RiskFactorSet(
        academic=academic,
        attendance=attendance,
        engagement=engagement,
        financial=ML_FINANCIAL[metrics.fee_payment_status],
        social=social,
    )


def holistic_factors(metrics: StudentMetrics) -> RiskFactorSet:
    if metrics.fee_payment_status != FeePaymentStatus.CURRENT:
        financial = HOLISTIC_FINANCIAL[metrics.fee_payment_status]
    elif metrics.has_scholarship:
        financial = HOLISTIC_SCHOLARSHIP_FINANCIAL
    else:
        financial = HOLISTIC_FINANCIAL[FeePaymentStatus.CURRENT]

    return RiskFactorSet(
        academic=100 - (metrics.cgpa_ratio * 33.33
                        + metrics.assignment_completion_rate * 0.33
                        + metrics.test_score_average * 0.33),
        attendance=100 - (metrics.attendance_rate * 0.7
                          + (100 - metrics.total_absences * 2) * 0.2
                          + (100 - metrics.tardiness_count * 5) * 0.1),
        engagement=100 - ((metrics.login_frequency / 7) * 25
                          + metrics.class_participation_score * 0.5
                          + metrics.challenge_completion_rate * 0.25),
        financial=financial,
        social=100 - (metrics.class_participation_score * 0.6 + metrics.streak_ratio * 40),
    )


def compute_rule_based(metrics: StudentMetrics) -> AlgorithmResult:
    """Fixed-weight multi-factor score."""
    factors = rule_based_factors(metrics)
    score = clamp(weighted_sum(factors, RULE_BASED_WEIGHTS))
    return AlgorithmResult(
        algorithm=RULE_BASED,
        algorithm_name=ALGORITHM_NAMES[RULE_BASED],
        risk_score=score,
        risk_level=classify(score, RULE_BASED_THRESHOLDS),
        factors=factors.clamped(),
    )


def compute_ml_based(metrics: StudentMetrics) -> AlgorithmResult:
    """Non-linear penalties with dynamic weighting."""
    factors = ml_factors(metrics)
    score = clamp(weighted_sum(factors, pick_weights(factors)))
    return AlgorithmResult(
        algorithm=ML_BASED,
        algorithm_name=ALGORITHM_NAMES[ML_BASED],
        risk_score=score,
        risk_level=classify(score, ML_BASED_THRESHOLDS),
        factors=factors.clamped(),
    )


def compute_holistic(metrics: StudentMetrics) -> AlgorithmResult:
    """Equal weights scaled by the compound interaction multiplier."""
    factors = holistic_factors(metrics)
    multiplier = compound_multiplier(
        factors,
        financial_pressure=(factors.financial > COMPOUND_TRIGGER
                            and factors.academic > COMPOUND_ACADEMIC_FINANCIAL_TRIGGER),
    )
    base = sum(value * HOLISTIC_WEIGHT for value in factors.to_dict().values())
    score = clamp(base * multiplier)
    return AlgorithmResult(
        algorithm=HOLISTIC,
        algorithm_name=ALGORITHM_NAMES[HOLISTIC],
        risk_score=score,
        risk_level=classify(score, HOLISTIC_THRESHOLDS),
        factors=factors.clamped(),
        compound_multiplier=multiplier,
    )


def combined_factors(metrics: StudentMetrics) -> RiskFactorSet:
    """ML and Holistic factors blended 60/40."""
    return ml_factors(metrics).blend(holistic_factors(metrics), ML_BLEND, HOLISTIC_BLEND)


def compute_combined(metrics: StudentMetrics) -> AlgorithmResult:
    """
    ML + Holistic combined algorithm.

    Blends the ML and Holistic factor sets, applies the compound multiplier
    to the blended factors (financial term fires when fees are not current
    and blended academic risk is above 50) and weights them dynamically.
    """
    factors = combined_factors(metrics)
    multiplier = compound_multiplier(
        factors,
        financial_pressure=(not metrics.is_fee_current
                            and factors.academic > COMPOUND_ACADEMIC_FINANCIAL_TRIGGER),
    )
    score = clamp(weighted_sum(factors, pick_weights(factors)) * multiplier)
    return AlgorithmResult(
        algorithm=ML_HOLISTIC,
        algorithm_name=ALGORITHM_NAMES[ML_HOLISTIC],
        risk_score=score,
        risk_level=classify(score, ML_HOLISTIC_THRESHOLDS),
        factors=factors.clamped(),
        compound_multiplier=multiplier,
    )


ALGORITHMS: Dict[str, Callable[[StudentMetrics], AlgorithmResult]] = {
    RULE_BASED: compute_rule_based,
    ML_BASED: compute_ml_based,
    HOLISTIC: compute_holistic,
    ML_HOLISTIC: compute_combined,
}


def compute_all(metrics: StudentMetrics) -> Dict[str, AlgorithmResult]:
    """Run every algorithm on the same snapshot."""
    return {key: algorithm(metrics) for key, algorithm in ALGORITHMS.items()}

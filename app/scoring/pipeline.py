"""
Per-student assessment pipeline.

Runs every algorithm, combines them into an ensemble, adjusts the ensemble
for the recent trend and annotates the result with recommendations. The
returned AssessmentOutcome is what callers persist as a RiskAssessment.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from app.scoring.algorithms import ML_HOLISTIC, ML_HOLISTIC_THRESHOLDS, AlgorithmResult, classify, compute_all
from app.scoring.ensemble import EnsembleResult, combine
from app.scoring.metrics import RiskFactorSet, RiskLevel, StudentMetrics
from app.scoring.recommendations import generate_recommendations
from app.scoring.temporal import TemporalTrend, Trend, analyze_trend, apply_temporal_adjustment, temporal_adjustment

MODE_COMBINED = "combined"
MODE_ENSEMBLE = "ensemble"
SCORING_MODES = (MODE_COMBINED, MODE_ENSEMBLE)


@dataclass(frozen=True)
class AssessmentOutcome:
    """Everything computed for one student in one run."""

    student_id: str
    mode: str
    risk_score: float
    risk_level: RiskLevel
    factors: RiskFactorSet
    recommendations: List[str]
    trend_direction: str
    previous_score: Optional[float]
    ensemble: EnsembleResult
    temporal: TemporalTrend
    temporal_adjustment: float
    enhanced_score: float
    algorithm_results: Dict[str, AlgorithmResult] = field(default_factory=dict)

    @property
    def predicted_dropout_probability(self) -> float:
        return self.risk_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "mode": self.mode,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level.value,
            "factors": self.factors.to_dict(),
            "recommendations": list(self.recommendations),
            "predicted_dropout_probability": self.predicted_dropout_probability,
            "trend_direction": self.trend_direction,
            "previous_score": self.previous_score,
            "enhanced_score": self.enhanced_score,
            "algorithm_scores": {key: result.risk_score for key, result in self.algorithm_results.items()},
            "ensemble": self.ensemble.to_dict(),
            "temporal": dict(self.temporal.to_dict(), adjustment=self.temporal_adjustment),
        }


def trend_direction(new_score: float, previous_score: Optional[float]) -> str:
    """Direction of the new score relative to the previous one, stable when there is none."""
    if previous_score is None:
        return Trend.STABLE.value
    return analyze_trend([new_score, previous_score]).trend.value


def assess(
    student_id: str,
    metrics: StudentMetrics,
    history: Sequence[float] = (),
    mode: str = MODE_COMBINED,
) -> AssessmentOutcome:
    """
    Compute a full assessment for one student.

    Args:
        student_id: Student identifier
        metrics: Clamped metric snapshot
        history: Prior risk scores, most recent first. Persisted calculations
            pass only scores stored in the same mode
        mode: "combined" scores with the ML + Holistic algorithm,
            "ensemble" with the trend-adjusted weighted ensemble

    Returns:
        AssessmentOutcome

    Raises:
        ValueError: If mode is unknown
    """
    if mode not in SCORING_MODES:
        raise ValueError(f"Unknown scoring mode: {mode}")

    results = compute_all(metrics)
    primary = results[ML_HOLISTIC]
    ensemble = combine(list(results.values()))

    temporal = analyze_trend(history)
    adjustment = temporal_adjustment(temporal)
    enhanced_score = apply_temporal_adjustment(ensemble.score, temporal)

    if mode == MODE_ENSEMBLE:
        risk_score = enhanced_score
        risk_level = classify(enhanced_score, ML_HOLISTIC_THRESHOLDS)
    else:
        risk_score = primary.risk_score
        risk_level = primary.risk_level

    previous_score = float(history[0]) if len(history) else None
    direction = trend_direction(risk_score, previous_score)

    recommendations = generate_recommendations(
        primary.factors,
        trend=Trend(direction) if previous_score is not None else None,
        compound_multiplier=primary.compound_multiplier,
        ensemble_std_dev=ensemble.std_dev,
    )

    return AssessmentOutcome(
        student_id=student_id,
        mode=mode,
        risk_score=risk_score,
        risk_level=risk_level,
        factors=primary.factors,
        recommendations=recommendations,
        trend_direction=direction,
        previous_score=previous_score,
        ensemble=ensemble,
        temporal=temporal,
        temporal_adjustment=adjustment,
        enhanced_score=enhanced_score,
        algorithm_results=results,
    )

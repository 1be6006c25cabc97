"""
Temporal trend analysis over a short history of risk scores.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence

from app.scoring.metrics import MAX_PERCENT

TREND_THRESHOLD = 5.0
FULL_CONFIDENCE_VELOCITY = 10.0
ADJUSTMENT_PER_CONFIDENCE = 0.005
MIN_IMPROVING_ADJUSTMENT = 0.8


class Trend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class TemporalTrend:
    """Velocity and acceleration of the risk score. Lower score means lower risk."""

    velocity: float
    acceleration: float
    trend: Trend
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "velocity": self.velocity,
            "acceleration": self.acceleration,
            "trend": self.trend.value,
            "confidence": self.confidence,
        }


INSUFFICIENT = TemporalTrend(velocity=0.0, acceleration=0.0, trend=Trend.INSUFFICIENT_DATA, confidence=0.0)


def classify_velocity(velocity: float) -> Trend:
    if velocity < -TREND_THRESHOLD:
        return Trend.IMPROVING
    if velocity > TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.STABLE


def analyze_trend(history: Sequence[float]) -> TemporalTrend:
    """
    Analyze score movement.

    Args:
        history: Risk scores ordered most recent first

    Returns:
        TemporalTrend, insufficient_data when fewer than two points are given
    """
    if len(history) < 2:
        return INSUFFICIENT

    velocity = float(history[0]) - float(history[1])
    acceleration = 0.0
    if len(history) >= 3:
        acceleration = velocity - (float(history[1]) - float(history[2]))

    return TemporalTrend(
        velocity=velocity,
        acceleration=acceleration,
        trend=classify_velocity(velocity),
        confidence=min(MAX_PERCENT, abs(velocity) / FULL_CONFIDENCE_VELOCITY * 100),
    )


def temporal_adjustment(trend: TemporalTrend) -> float:
    """
    Multiplier applied to an ensemble score.

    Declining trends push the score up, improving trends pull it down
    (never below 80%), anything else leaves it unchanged.
    """
    if trend.trend == Trend.DECLINING:
        return 1 + trend.confidence * ADJUSTMENT_PER_CONFIDENCE
    if trend.trend == Trend.IMPROVING:
        return max(MIN_IMPROVING_ADJUSTMENT, 1 - trend.confidence * ADJUSTMENT_PER_CONFIDENCE)
    return 1.0


def apply_temporal_adjustment(score: float, trend: TemporalTrend) -> float:
    return min(MAX_PERCENT, score * temporal_adjustment(trend))

"""
Weighted ensemble of algorithm results with an agreement-based confidence.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

import numpy as np

from app.scoring.algorithms import HOLISTIC, ML_BASED, ML_HOLISTIC, RULE_BASED, AlgorithmResult
from app.scoring.metrics import MAX_PERCENT

# Weights sum to 1.0
DEFAULT_WEIGHTS: Dict[str, float] = {
    RULE_BASED: 0.15,
    ML_BASED: 0.25,
    HOLISTIC: 0.20,
    ML_HOLISTIC: 0.40,
}

HIGH_AGREEMENT_STD_DEV = 10.0
MODERATE_AGREEMENT_STD_DEV = 20.0
HIGH_AGREEMENT_VARIANCE = 100.0
MODERATE_AGREEMENT_VARIANCE = 400.0

CONFIDENCE_PER_STD_DEV = 2.0
BOOST_BASE = 0.7
BOOST_PER_CONFIDENCE = 0.003


class Agreement(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


@dataclass(frozen=True)
class EnsembleResult:
    """Weighted ensemble score and how much the algorithms agree."""

    score: float
    confidence: float
    std_dev: float
    agreement: Agreement
    weights: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "confidence": self.confidence,
            "std_dev": self.std_dev,
            "agreement": self.agreement.value,
            "weights": dict(self.weights),
        }


def agreement_from_std_dev(std_dev: float) -> Agreement:
    if std_dev < HIGH_AGREEMENT_STD_DEV:
        return Agreement.HIGH
    if std_dev < MODERATE_AGREEMENT_STD_DEV:
        return Agreement.MODERATE
    return Agreement.LOW


def agreement_from_variance(variance: float) -> Agreement:
    """Agreement label used by the three-algorithm comparison view."""
    if variance < HIGH_AGREEMENT_VARIANCE:
        return Agreement.HIGH
    if variance < MODERATE_AGREEMENT_VARIANCE:
        return Agreement.MODERATE
    return Agreement.LOW


def combine(
    results: Sequence[AlgorithmResult],
    weights: Optional[Mapping[str, float]] = None,
) -> EnsembleResult:
    """
    Combine algorithm results into a weighted ensemble.

    The spread is measured as the mean squared deviation of the raw scores
    from the weighted ensemble score.

    Args:
        results: Algorithm results to combine
        weights: Weight per algorithm key, defaults to DEFAULT_WEIGHTS.
            Algorithms without a weight contribute 0 to the score.

    Returns:
        EnsembleResult

    Raises:
        ValueError: If results is empty
    """
    if not results:
        raise ValueError("Cannot combine an empty list of algorithm results")

    weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
    scores = np.array([result.risk_score for result in results], dtype=float)
    applied = np.array([weights.get(result.algorithm, 0.0) for result in results], dtype=float)

    ensemble_score = float(np.dot(scores, applied))
    variance = float(np.mean((scores - ensemble_score) ** 2))
    std_dev = float(np.sqrt(variance))
    confidence = max(0.0, MAX_PERCENT - std_dev * CONFIDENCE_PER_STD_DEV)

    return EnsembleResult(
        score=ensemble_score,
        confidence=confidence,
        std_dev=std_dev,
        agreement=agreement_from_std_dev(std_dev),
        weights={result.algorithm: weights.get(result.algorithm, 0.0) for result in results},
    )


def apply_confidence_boost(score: float, confidence: float) -> float:
    """
    Scale a score by inter-algorithm agreement.

    Full agreement (confidence 100) keeps the score, no agreement scales it to 70%.
    """
    return min(MAX_PERCENT, score * (BOOST_BASE + confidence * BOOST_PER_CONFIDENCE))

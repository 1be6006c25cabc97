"""
Side-by-side algorithm comparison payloads for the teacher dashboard.
"""
from typing import Any, Dict, Mapping, Optional

import numpy as np

from app.scoring.algorithms import compute_all, compute_holistic, compute_ml_based, compute_rule_based
from app.scoring.ensemble import Agreement, agreement_from_variance, apply_confidence_boost, combine
from app.scoring.metrics import StudentMetrics

AGREEMENT_ADVICE = {
    Agreement.HIGH: "All algorithms agree - the risk assessment is reliable",
    Agreement.MODERATE: "Algorithms partially agree - review the individual risk factors",
    Agreement.LOW: "Algorithms disagree - gather more data and consider multiple intervention approaches",
}


def compare_three(metrics: StudentMetrics) -> Dict[str, Any]:
    """
    Compare the Rule-Based, ML-Inspired and Holistic algorithms.

    Agreement is labelled from the population variance of the three scores.
    """
    original = compute_rule_based(metrics)
    ml = compute_ml_based(metrics)
    holistic = compute_holistic(metrics)

    scores = np.array([original.risk_score, ml.risk_score, holistic.risk_score])
    variance = float(np.var(scores))
    agreement = agreement_from_variance(variance)

    return {
        "original": original.to_dict(),
        "ml": ml.to_dict(),
        "holistic": holistic.to_dict(),
        "comparison": {
            "average_score": float(np.mean(scores)),
            "variance": variance,
            "agreement": agreement.value,
            "recommendation": AGREEMENT_ADVICE[agreement],
        },
    }


def compare_all(metrics: StudentMetrics, weights: Optional[Mapping[str, float]] = None) -> Dict[str, Any]:
    """
    Compare all four algorithms and their weighted ensemble.

    Args:
        metrics: Student snapshot
        weights: Optional ensemble weights per algorithm key

    Returns:
        Dictionary with per-algorithm results, ensemble and summary statistics
    """
    results = compute_all(metrics)
    ensemble = combine(list(results.values()), weights)
    scores = np.array([result.risk_score for result in results.values()])

    ensemble_data = ensemble.to_dict()
    ensemble_data["adjusted_score"] = apply_confidence_boost(ensemble.score, ensemble.confidence)

    return {
        "algorithms": {key: result.to_dict() for key, result in results.items()},
        "ensemble": ensemble_data,
        "summary": {
            "average_score": float(np.mean(scores)),
            "variance": float(np.var(scores)),
            "std_dev": ensemble.std_dev,
            "agreement": ensemble.agreement.value,
            "min_score": float(np.min(scores)),
            "max_score": float(np.max(scores)),
            "recommendation": AGREEMENT_ADVICE[ensemble.agreement],
        },
    }

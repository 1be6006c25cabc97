"""
Tests for the per-student assessment pipeline.
"""

import pytest

from app.scoring import recommendations as rec
from app.scoring.algorithms import compute_combined
from app.scoring.metrics import RiskLevel
from app.scoring.pipeline import MODE_COMBINED, MODE_ENSEMBLE, assess, trend_direction
from app.scoring.temporal import Trend


class TestTrendDirection:
    """Test trend direction against the previous score."""

    def test_no_previous_score(self):
        assert trend_direction(80, None) == "stable"

    @pytest.mark.parametrize("new,previous,expected", [
        (80, 60, "declining"),
        (40, 60, "improving"),
        (63, 60, "stable"),
        (65, 60, "stable"),
    ])
    def test_direction(self, new, previous, expected):
        assert trend_direction(new, previous) == expected


class TestAssess:
    """Test full assessments."""

    def test_combined_mode_uses_primary_algorithm(self, at_risk_metrics):
        outcome = assess("s1", at_risk_metrics)
        primary = compute_combined(at_risk_metrics)

        assert outcome.mode == MODE_COMBINED
        assert outcome.risk_score == primary.risk_score
        assert outcome.risk_level == RiskLevel.HIGH
        assert outcome.factors == primary.factors
        assert outcome.predicted_dropout_probability == outcome.risk_score

    def test_first_assessment(self, at_risk_metrics):
        outcome = assess("s1", at_risk_metrics)

        assert outcome.previous_score is None
        assert outcome.trend_direction == "stable"
        assert outcome.temporal.trend == Trend.INSUFFICIENT_DATA
        assert outcome.recommendations == [
            rec.ACADEMIC_URGENT,
            rec.ATTENDANCE_CONTACT,
            rec.ENGAGEMENT_PERSONALIZED,
            rec.FINANCIAL_AID,
            rec.SOCIAL_PEER,
            rec.COMPOUND_RISK,
        ]

    def test_declining_against_previous(self, at_risk_metrics):
        outcome = assess("s1", at_risk_metrics, history=[10.0])

        assert outcome.previous_score == 10.0
        assert outcome.trend_direction == "declining"
        assert rec.DECLINING in outcome.recommendations

    def test_improving_against_previous(self, model_student_metrics):
        outcome = assess("s1", model_student_metrics, history=[90.0, 96.0])

        assert outcome.trend_direction == "improving"
        assert outcome.recommendations[0] == rec.IMPROVING
        assert outcome.temporal.trend == Trend.IMPROVING

    def test_ensemble_mode(self, at_risk_metrics):
        outcome = assess("s1", at_risk_metrics, mode=MODE_ENSEMBLE)

        assert outcome.risk_score == outcome.enhanced_score
        assert outcome.enhanced_score == pytest.approx(outcome.ensemble.score)
        assert outcome.temporal_adjustment == 1.0

    def test_ensemble_mode_with_declining_history(self, at_risk_metrics):
        outcome = assess("s1", at_risk_metrics, history=[60.0, 40.0], mode=MODE_ENSEMBLE)

        assert outcome.temporal.trend == Trend.DECLINING
        assert outcome.temporal_adjustment == pytest.approx(1.5)
        assert outcome.enhanced_score == min(100.0, outcome.ensemble.score * outcome.temporal_adjustment)

    def test_unknown_mode(self, at_risk_metrics):
        with pytest.raises(ValueError):
            assess("s1", at_risk_metrics, mode="magic")

    def test_to_dict(self, at_risk_metrics):
        data = assess("s1", at_risk_metrics, history=[50.0]).to_dict()

        assert data["student_id"] == "s1"
        assert data["risk_level"] == "high"
        assert set(data["algorithm_scores"]) == {"rule_based", "ml_based", "holistic", "ml_holistic"}
        assert data["temporal"]["adjustment"] == 1.0
        assert data["predicted_dropout_probability"] == data["risk_score"]

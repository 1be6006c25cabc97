"""
Risk service: runs the scoring engine for stored students and keeps the assessment history.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from app.models.risk import RiskAssessment
from app.models.student import Student
from app.scoring.comparison import compare_all, compare_three
from app.scoring.metrics import RiskLevel, StudentMetrics
from app.scoring.pipeline import MODE_COMBINED, MODE_ENSEMBLE, SCORING_MODES, AssessmentOutcome, assess
from app.scoring.temporal import analyze_trend
from app.services.config_service import config_service

logger = logging.getLogger("app.risk")

STUDENT_NOT_FOUND = "Student not found"
DEFAULT_HISTORY_LIMIT = 10


class RiskService:
    """Service for computing, storing and reporting dropout risk assessments."""

    def __init__(self):
        self.logger = logger

    def _scoring_mode(self, mode: Optional[str]) -> str:
        mode = (mode or config_service.scoring_mode).lower()
        if mode not in SCORING_MODES:
            self.logger.warning(f"Unknown scoring mode {mode!r}, using {MODE_COMBINED}")
            return MODE_COMBINED
        return mode

    def get_latest(self, student_id: str, db: Session) -> Optional[RiskAssessment]:
        """Most recently created assessment for a student."""
        return db.query(RiskAssessment).filter(
            RiskAssessment.student_id == student_id
        ).order_by(RiskAssessment.created_at.desc(), RiskAssessment.id.desc()).first()

    def get_history(
        self,
        student_id: str,
        db: Session,
        limit: int = DEFAULT_HISTORY_LIMIT,
        scoring_mode: Optional[str] = None,
    ) -> List[RiskAssessment]:
        """
        Assessment history for a student, most recent first.

        Args:
            student_id: Student ID
            db: Database session
            limit: Maximum number of assessments
            scoring_mode: Only assessments scored in this mode, all modes when None

        Returns:
            List of RiskAssessment objects
        """
        query = db.query(RiskAssessment).filter(RiskAssessment.student_id == student_id)
        if scoring_mode:
            query = query.filter(RiskAssessment.scoring_mode == scoring_mode)
        return query.order_by(RiskAssessment.created_at.desc(), RiskAssessment.id.desc()).limit(limit).all()

    def get_score_history(
        self,
        student_id: str,
        db: Session,
        limit: Optional[int] = None,
        scoring_mode: Optional[str] = None,
    ) -> List[float]:
        limit = limit or config_service.history_window
        return [assessment.risk_score for assessment in self.get_history(student_id, db, limit, scoring_mode)]

    def _claim_student(self, student_id: str, db: Session) -> Optional[Student]:
        """
        Write-lock the student row for the rest of the transaction.

        Stamping last_assessed_at takes a row lock on PostgreSQL and the
        database write lock on SQLite, so concurrent calculations for the same
        student (from any process) queue here until the holder commits.

        Returns:
            The freshly loaded student, or None if it does not exist
        """
        claimed = db.query(Student).filter(Student.id == student_id).update(
            {Student.last_assessed_at: config_service.now()}, synchronize_session=False
        )
        if not claimed:
            db.rollback()
            return None
        return db.query(Student).populate_existing().filter(Student.id == student_id).one()

    def create_assessment(self, data: Mapping[str, Any], db: Session) -> RiskAssessment:
        """
        Insert an assessment record as given.

        Args:
            data: RiskAssessment fields
            db: Database session

        Returns:
            Created RiskAssessment
        """
        fields = dict(data)
        fields.setdefault("predicted_dropout_probability", fields["risk_score"])
        fields.setdefault("created_at", config_service.now())
        assessment = RiskAssessment(**fields)
        db.add(assessment)
        db.commit()
        db.refresh(assessment)
        return assessment

    def calculate_risk(self, student_id: str, db: Session, mode: Optional[str] = None) -> Dict[str, Any]:
        """
        Calculate and store a new risk assessment for a student.

        Calculations for the same student are serialized at the database:
        the student row stays write-locked from the history read until the
        new assessment is committed, so "previous" is always the assessment
        committed immediately before in the same scoring mode.

        Args:
            student_id: Student ID
            db: Database session
            mode: Scoring mode, defaults to RISK_SCORING_MODE

        Returns:
            Dictionary with the stored assessment and the full outcome, or an error
        """
        mode = self._scoring_mode(mode)

        student = self._claim_student(student_id, db)
        if not student:
            self.logger.warning(f"Risk calculation requested for unknown student {student_id}")
            return {"error": STUDENT_NOT_FOUND}

        try:
            metrics = StudentMetrics.from_record(student)
            history = self.get_score_history(student_id, db, scoring_mode=mode)
            outcome = assess(student_id, metrics, history, mode)
            assessment = self.create_assessment(self._record_fields(outcome), db)
        except Exception:
            db.rollback()
            raise

        self.logger.info(
            f"Risk calculated for student {student_id}: score={outcome.risk_score:.1f} "
            f"level={outcome.risk_level.value} trend={outcome.trend_direction} mode={mode}"
        )
        return {"assessment": assessment, "outcome": outcome}

    def _record_fields(self, outcome: AssessmentOutcome) -> Dict[str, Any]:
        factors = outcome.factors
        return {
            "student_id": outcome.student_id,
            "risk_level": outcome.risk_level.value,
            "risk_score": outcome.risk_score,
            "academic_risk": factors.academic,
            "attendance_risk": factors.attendance,
            "engagement_risk": factors.engagement,
            "financial_risk": factors.financial,
            "social_risk": factors.social,
            "recommendations": list(outcome.recommendations),
            "predicted_dropout_probability": outcome.predicted_dropout_probability,
            "trend_direction": outcome.trend_direction,
            "previous_score": outcome.previous_score,
            "scoring_mode": outcome.mode,
            "ensemble_score": outcome.ensemble.score,
            "ensemble_confidence": outcome.ensemble.confidence,
            "algorithm_agreement": outcome.ensemble.agreement.value,
        }

    def calculate_enhanced_risk(self, student_id: str, db: Session) -> Dict[str, Any]:
        """
        Ensemble + temporal analysis for a student without storing anything.

        The trend is read from the stored history across scoring modes.
        """
        student = db.query(Student).filter(Student.id == student_id).first()
        if not student:
            return {"error": STUDENT_NOT_FOUND}

        history = self.get_score_history(student_id, db)
        outcome = assess(student_id, StudentMetrics.from_record(student), history, MODE_ENSEMBLE)
        return outcome.to_dict()

    def get_temporal_trend(self, student_id: str, db: Session) -> Dict[str, Any]:
        """Velocity, acceleration and trend of the stored score history, across scoring modes."""
        if not db.query(Student).filter(Student.id == student_id).first():
            return {"error": STUDENT_NOT_FOUND}

        scores = self.get_score_history(student_id, db)
        trend = analyze_trend(scores).to_dict()
        trend["recent_scores"] = scores
        return trend

    def compare_algorithms(self, student_id: str, db: Session) -> Dict[str, Any]:
        """Three-way comparison of Rule-Based, ML-Inspired and Holistic."""
        student = db.query(Student).filter(Student.id == student_id).first()
        if not student:
            return {"error": STUDENT_NOT_FOUND}
        return compare_three(StudentMetrics.from_record(student))

    def compare_all_algorithms(
        self, student_id: str, db: Session, weights: Optional[Mapping[str, float]] = None
    ) -> Dict[str, Any]:
        """Four-way comparison plus weighted ensemble."""
        student = db.query(Student).filter(Student.id == student_id).first()
        if not student:
            return {"error": STUDENT_NOT_FOUND}
        return compare_all(StudentMetrics.from_record(student), weights)

    def latest_per_student(self, db: Session) -> Dict[str, RiskAssessment]:
        """Latest assessment of every assessed student."""
        latest: Dict[str, RiskAssessment] = {}
        assessments = db.query(RiskAssessment).order_by(
            RiskAssessment.created_at.desc(), RiskAssessment.id.desc()
        ).all()
        for assessment in assessments:
            latest.setdefault(assessment.student_id, assessment)
        return latest

    def get_high_risk_students(self, db: Session) -> List[RiskAssessment]:
        """Latest assessments currently at high risk, riskiest first."""
        high = [a for a in self.latest_per_student(db).values() if a.risk_level == RiskLevel.HIGH.value]
        return sorted(high, key=lambda a: a.risk_score, reverse=True)

    def recalculate_all(
        self,
        session_factory: Callable[[], Session],
        max_workers: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Recalculate risk for every student on a bounded thread pool.

        Each student is handled in its own session. Failures are logged and
        collected; they never abort the batch.

        Args:
            session_factory: Callable returning a new Session
            max_workers: Pool size, defaults to RISK_BULK_MAX_WORKERS

        Returns:
            Dictionary with count of recalculated students and per-student errors
        """
        max_workers = max_workers or config_service.bulk_max_workers
        started_at = config_service.now()

        db = session_factory()
        try:
            student_ids = [row[0] for row in db.query(Student.id).all()]
        finally:
            db.close()

        self.logger.info(f"Starting risk recalculation for {len(student_ids)} students with {max_workers} workers")

        results = {"count": 0, "errors": [], "total_students": len(student_ids)}
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            for student_id, error in pool.map(lambda sid: self._recalculate_one(sid, session_factory), student_ids):
                if error is None:
                    results["count"] += 1
                else:
                    results["errors"].append({"student_id": student_id, "error": error})

        results["duration_seconds"] = (config_service.now() - started_at).total_seconds()
        self.logger.info(
            f"Risk recalculation completed: {results['count']} updated, {len(results['errors'])} failed"
        )
        return results

    def _recalculate_one(self, student_id: str, session_factory: Callable[[], Session]):
        db = session_factory()
        try:
            result = self.calculate_risk(student_id, db)
            if "error" in result:
                self.logger.warning(f"Failed to recalculate risk for student {student_id}: {result['error']}")
                return student_id, result["error"]
            return student_id, None
        except Exception as e:
            db.rollback()
            self.logger.exception(f"Failed to recalculate risk for student {student_id}: {e}")
            return student_id, str(e)
        finally:
            db.close()


# Global instance
risk_service = RiskService()

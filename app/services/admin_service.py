"""
Administrative statistics and maintenance.
"""
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.models.intervention import Intervention
from app.models.risk import RiskAssessment
from app.models.student import Student
from app.models.teacher import Teacher
from app.scoring.metrics import RiskLevel
from app.services.risk_service import risk_service

logger = logging.getLogger("app.admin")


class AdminService:
    """Service for system-wide statistics and bulk maintenance."""

    def get_statistics(self, db: Session) -> Dict[str, Any]:
        """
        System statistics.

        A student counts as at risk when their latest assessment is moderate or high.
        """
        latest = risk_service.latest_per_student(db)
        levels = {level.value: 0 for level in RiskLevel}
        for assessment in latest.values():
            levels[assessment.risk_level] = levels.get(assessment.risk_level, 0) + 1

        total_students = db.query(Student).count()
        return {
            "total_students": total_students,
            "total_teachers": db.query(Teacher).count(),
            "assessed_students": len(latest),
            "pending_students": total_students - len(latest),
            "total_assessments": db.query(RiskAssessment).count(),
            "at_risk_students": levels[RiskLevel.MODERATE.value] + levels[RiskLevel.HIGH.value],
            "risk_levels": levels,
            "open_interventions": db.query(Intervention).filter(
                Intervention.status.in_(["planned", "in-progress"])
            ).count(),
        }

    def clear_all(self, db: Session) -> Dict[str, Any]:
        """
        Delete every student, teacher, assessment and intervention.

        This is the only path that removes assessment history.
        """
        try:
            interventions = db.query(Intervention).delete(synchronize_session=False)
            risks = db.query(RiskAssessment).delete(synchronize_session=False)
            students = db.query(Student).delete(synchronize_session=False)
            teachers = db.query(Teacher).delete(synchronize_session=False)
            db.commit()
        except Exception as e:
            logger.error(f"Error clearing database: {e}")
            db.rollback()
            raise

        logger.warning(
            f"Database cleared: {students} students, {teachers} teachers, "
            f"{risks} assessments, {interventions} interventions"
        )
        return {
            "message": "Database cleared successfully",
            "students_deleted": students,
            "teachers_deleted": teachers,
            "risks_deleted": risks,
            "interventions_deleted": interventions,
        }

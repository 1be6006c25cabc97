"""
Intervention service for planning and closing out teacher interventions.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.intervention import INTERVENTION_STATUSES, Intervention
from app.models.student import Student
from app.scoring.metrics import clamp
from app.services.config_service import config_service
from app.services.teacher_service import TEACHER_NOT_FOUND, teacher_service

logger = logging.getLogger("app.intervention")

# Effectiveness above this counts as a successful intervention for the teacher
SUCCESS_EFFECTIVENESS = 50.0


def intervention_effectiveness(initial_risk_score: float, final_risk_score: float) -> float:
    """
    Relative risk reduction in percent, clamped to 0-100.

    A zero initial score has nothing to reduce and yields 0.
    """
    if not initial_risk_score:
        return 0.0
    improvement = initial_risk_score - final_risk_score
    return clamp(improvement / initial_risk_score * 100)


class InterventionService:
    """Service for teacher interventions."""

    def create_intervention(self, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
        """
        Create a planned intervention.

        Args:
            data: Intervention fields
            db: Database session

        Returns:
            Dictionary with the intervention or an error
        """
        if not db.query(Student).filter(Student.id == data["student_id"]).first():
            return {"error": "Student not found"}
        if not teacher_service.get_teacher(data["teacher_id"], db):
            return {"error": TEACHER_NOT_FOUND}

        intervention = Intervention(**{key: value for key, value in data.items() if value is not None})
        intervention.status = "planned"
        intervention.created_at = config_service.now()

        db.add(intervention)
        db.commit()
        db.refresh(intervention)

        logger.info(f"Intervention {intervention.id} planned for student {intervention.student_id}")
        return {"intervention": intervention}

    def get_for_student(self, student_id: str, db: Session) -> List[Intervention]:
        return db.query(Intervention).filter(
            Intervention.student_id == student_id
        ).order_by(Intervention.created_at.desc(), Intervention.id.desc()).all()

    def get_by_teacher(self, teacher_id: str, db: Session) -> Dict[str, Any]:
        """List a teacher's interventions, newest first, or an error for an unknown teacher."""
        if not teacher_service.get_teacher(teacher_id, db):
            return {"error": TEACHER_NOT_FOUND}

        interventions = db.query(Intervention).filter(
            Intervention.teacher_id == teacher_id
        ).order_by(Intervention.created_at.desc(), Intervention.id.desc()).all()
        return {"interventions": interventions}

    def update_status(
        self, intervention_id: int, status: str, db: Session, notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Change the status of an intervention.

        Completing an intervention stamps its completed date.
        """
        if status not in INTERVENTION_STATUSES:
            return {"error": f"Invalid status: {status}"}

        intervention = db.query(Intervention).filter(Intervention.id == intervention_id).first()
        if not intervention:
            return {"error": "Intervention not found"}

        intervention.status = status
        if notes:
            intervention.notes = notes
        if status == "completed":
            intervention.completed_date = config_service.now()

        db.add(intervention)
        db.commit()
        db.refresh(intervention)

        logger.info(f"Intervention {intervention_id} status -> {status}")
        return {"intervention": intervention}

    def complete(
        self, intervention_id: int, final_risk_score: float, db: Session, notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Complete an intervention and record how much it reduced risk.

        Args:
            intervention_id: Intervention ID
            final_risk_score: Risk score after the intervention
            db: Database session
            notes: Optional closing notes

        Returns:
            Dictionary with the intervention and its effectiveness, or an error
        """
        intervention = db.query(Intervention).filter(Intervention.id == intervention_id).first()
        if not intervention:
            return {"error": "Intervention not found"}

        effectiveness = intervention_effectiveness(intervention.initial_risk_score, final_risk_score)
        first_completion = intervention.effectiveness is None

        intervention.status = "completed"
        intervention.completed_date = config_service.now()
        intervention.final_risk_score = final_risk_score
        intervention.effectiveness = effectiveness
        if notes:
            intervention.notes = notes

        db.add(intervention)
        # Re-completing with a new score updates effectiveness without recounting
        if first_completion:
            teacher_service.record_completion(
                intervention.teacher_id, effectiveness > SUCCESS_EFFECTIVENESS, db
            )
        db.commit()
        db.refresh(intervention)

        logger.info(f"Intervention {intervention_id} completed with effectiveness {effectiveness:.1f}")
        return {"intervention": intervention, "effectiveness": effectiveness}

"""
Student service for managing student profiles and metrics.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.student import Student
from app.scoring.metrics import StudentMetrics
from app.services.config_service import config_service

logger = logging.getLogger("app.student")

METRIC_FIELDS = (
    "cgpa",
    "assignment_completion_rate",
    "test_score_average",
    "attendance_rate",
    "total_absences",
    "tardiness_count",
    "login_frequency",
    "class_participation_score",
    "challenge_completion_rate",
    "fee_payment_status",
    "has_scholarship",
    "current_streak",
    "longest_streak",
)
COUNT_FIELDS = ("total_absences", "tardiness_count", "current_streak", "longest_streak")


class StudentService:
    """Service for student profiles."""

    def create_student(self, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
        """
        Create a student profile.

        Args:
            data: Profile fields and optional metrics
            db: Database session

        Returns:
            Dictionary with the created student or an error
        """
        existing = db.query(Student).filter(Student.student_number == data["student_number"]).first()
        if existing:
            logger.warning(f"Student profile already exists: {data['student_number']}")
            return {"error": "Student profile already exists"}

        fields = {key: value for key, value in data.items() if value is not None}
        fields.update(self._normalized_metrics(fields))
        student = Student(id=uuid.uuid4().hex, **fields)

        db.add(student)
        db.commit()
        db.refresh(student)

        logger.info(f"Created student {student.id} ({student.student_number})")
        return {"student": student}

    def get_student(self, student_id: str, db: Session) -> Optional[Student]:
        return db.query(Student).filter(Student.id == student_id).first()

    def list_students(self, db: Session, teacher_id: Optional[str] = None) -> List[Student]:
        """
        List students, optionally only those assigned to a teacher.
        """
        query = db.query(Student)
        if teacher_id:
            query = query.filter(Student.assigned_teacher_id == teacher_id)
        return query.order_by(Student.full_name).all()

    def update_metrics(self, student_id: str, updates: Dict[str, Any], db: Session) -> Dict[str, Any]:
        """
        Update metric fields of a student.

        Values are clamped into their domain before they are stored.

        Args:
            student_id: Student ID
            updates: Metric fields to change
            db: Database session

        Returns:
            Dictionary with the updated student or an error
        """
        student = self.get_student(student_id, db)
        if not student:
            return {"error": "Student not found"}

        changes = {key: value for key, value in updates.items() if key in METRIC_FIELDS and value is not None}
        if not changes:
            return {"student": student}

        current = {name: getattr(student, name) for name in METRIC_FIELDS}
        current.update(changes)
        normalized = self._normalized_metrics(current)

        for name in changes:
            setattr(student, name, normalized[name])
        student.updated_at = config_service.now()

        db.add(student)
        db.commit()
        db.refresh(student)

        logger.info(f"Updated metrics for student {student_id}: {sorted(changes)}")
        return {"student": student}

    def _normalized_metrics(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Clamp the metric fields present in fields."""
        present = [name for name in METRIC_FIELDS if name in fields]
        if not present:
            return {}

        metrics = StudentMetrics.from_record(fields)
        normalized = {}
        for name in present:
            value = getattr(metrics, name)
            if name == "fee_payment_status":
                value = value.value
            elif name in COUNT_FIELDS:
                value = int(value)
            normalized[name] = value
        return normalized

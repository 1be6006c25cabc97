"""
Teacher service for managing teacher profiles.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.teacher import Teacher

logger = logging.getLogger("app.teacher")

TEACHER_NOT_FOUND = "Teacher not found"


class TeacherService:
    """Service for teacher profiles."""

    def create_teacher(self, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
        """
        Create a teacher profile.

        Args:
            data: Profile fields
            db: Database session

        Returns:
            Dictionary with the created teacher or an error
        """
        existing = db.query(Teacher).filter(Teacher.teacher_number == data["teacher_number"]).first()
        if existing:
            logger.warning(f"Teacher profile already exists: {data['teacher_number']}")
            return {"error": "Teacher profile already exists"}

        teacher = Teacher(id=uuid.uuid4().hex, **{key: value for key, value in data.items() if value is not None})

        db.add(teacher)
        db.commit()
        db.refresh(teacher)

        logger.info(f"Created teacher {teacher.id} ({teacher.teacher_number})")
        return {"teacher": teacher}

    def get_teacher(self, teacher_id: str, db: Session) -> Optional[Teacher]:
        return db.query(Teacher).filter(Teacher.id == teacher_id).first()

    def list_teachers(self, db: Session, department: Optional[str] = None) -> List[Teacher]:
        query = db.query(Teacher)
        if department:
            query = query.filter(Teacher.department == department)
        return query.order_by(Teacher.full_name).all()

    def record_completion(self, teacher_id: str, successful: bool, db: Session) -> None:
        """
        Count a completed intervention against its teacher.

        The caller commits. Increments run in SQL so parallel completions do not lose updates.
        """
        values = {Teacher.interventions_completed: Teacher.interventions_completed + 1}
        if successful:
            values[Teacher.successful_interventions] = Teacher.successful_interventions + 1
        db.query(Teacher).filter(Teacher.id == teacher_id).update(values, synchronize_session=False)


teacher_service = TeacherService()

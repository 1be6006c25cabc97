"""
Student profile API routes.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database.session import get_session
from app.services.risk_service import risk_service
from app.services.student_service import StudentService

router = APIRouter(prefix="/api/students", tags=["student"])
logger = logging.getLogger("app.student")

student_service = StudentService()


class StudentMetricsUpdate(BaseModel):
    cgpa: Optional[float] = None
    assignment_completion_rate: Optional[float] = None
    test_score_average: Optional[float] = None
    attendance_rate: Optional[float] = None
    total_absences: Optional[int] = None
    tardiness_count: Optional[int] = None
    login_frequency: Optional[float] = None
    class_participation_score: Optional[float] = None
    challenge_completion_rate: Optional[float] = None
    fee_payment_status: Optional[str] = None
    has_scholarship: Optional[bool] = None
    current_streak: Optional[int] = None
    longest_streak: Optional[int] = None


class StudentCreate(StudentMetricsUpdate):
    full_name: str
    student_number: str
    grade: Optional[str] = None
    section: Optional[str] = None
    email: Optional[str] = None
    assigned_teacher_id: Optional[str] = None


def _student_payload(student, db: Session) -> Dict[str, Any]:
    """Student fields plus latest risk summary ("pending" until the first calculation)."""
    data = student.model_dump()
    latest = risk_service.get_latest(student.id, db)
    data["risk"] = {
        "status": "calculated" if latest else "pending",
        "risk_level": latest.risk_level if latest else None,
        "risk_score": latest.risk_score if latest else None,
    }
    return data


@router.post("", status_code=201)
async def create_student(request_data: StudentCreate, db: Session = Depends(get_session)) -> Dict[str, Any]:
    """
    Create a student profile.

    Metrics outside their domain are clamped, not rejected.
    """
    result = student_service.create_student(request_data.model_dump(), db)
    if "error" in result:
        raise HTTPException(status_code=409, detail=result["error"])
    return result["student"].model_dump()


@router.get("")
async def list_students(
    teacher_id: Optional[str] = Query(default=None, description="Only students assigned to this teacher"),
    db: Session = Depends(get_session)
) -> Dict[str, Any]:
    """List students with their latest risk summary."""
    students = student_service.list_students(db, teacher_id)
    return {"students": [_student_payload(student, db) for student in students], "total": len(students)}


@router.get("/{student_id}")
async def get_student(student_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    student = student_service.get_student(student_id, db)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return _student_payload(student, db)


@router.patch("/{student_id}/metrics")
async def update_student_metrics(
    student_id: str, request_data: StudentMetricsUpdate, db: Session = Depends(get_session)
) -> Dict[str, Any]:
    """
    Update student metrics.

    Args:
        student_id: Student ID
        request_data: Metric fields to change
        db: Database session

    Returns:
        Updated student
    """
    result = student_service.update_metrics(student_id, request_data.model_dump(exclude_none=True), db)
    if "error" in result:
        raise HTTPException(status_code=404, detail=result["error"])
    return result["student"].model_dump()

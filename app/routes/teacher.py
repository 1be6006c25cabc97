"""
Teacher profile API routes.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.database.session import get_session
from app.services.teacher_service import TEACHER_NOT_FOUND, teacher_service

router = APIRouter(prefix="/api/teachers", tags=["teacher"])
logger = logging.getLogger("app.teacher")


class TeacherCreate(BaseModel):
    full_name: str
    teacher_number: str
    department: str = ""
    subjects: List[str] = Field(default_factory=list)
    email: Optional[str] = None


def _teacher_payload(teacher) -> Dict[str, Any]:
    data = teacher.model_dump()
    completed = teacher.interventions_completed
    data["success_rate"] = round(teacher.successful_interventions / completed * 100, 1) if completed else 0.0
    return data


@router.post("", status_code=201)
async def create_teacher(request_data: TeacherCreate, db: Session = Depends(get_session)) -> Dict[str, Any]:
    result = teacher_service.create_teacher(request_data.model_dump(), db)
    if "error" in result:
        raise HTTPException(status_code=409, detail=result["error"])
    return _teacher_payload(result["teacher"])


@router.get("")
async def list_teachers(
    department: Optional[str] = Query(default=None, description="Only teachers in this department"),
    db: Session = Depends(get_session)
) -> Dict[str, Any]:
    teachers = teacher_service.list_teachers(db, department)
    return {"teachers": [_teacher_payload(teacher) for teacher in teachers], "total": len(teachers)}


@router.get("/{teacher_id}")
async def get_teacher(teacher_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    teacher = teacher_service.get_teacher(teacher_id, db)
    if not teacher:
        raise HTTPException(status_code=404, detail=TEACHER_NOT_FOUND)
    return _teacher_payload(teacher)

"""
Intervention API routes.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database.session import get_session
from app.services.intervention_service import InterventionService

router = APIRouter(prefix="/api/interventions", tags=["intervention"])
logger = logging.getLogger("app.intervention")

intervention_service = InterventionService()


class InterventionCreate(BaseModel):
    student_id: str
    teacher_id: str
    title: str
    description: str = ""
    type: str
    priority: str = "medium"
    due_date: Optional[datetime] = None
    initial_risk_score: float


class StatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = None


class CompletionRequest(BaseModel):
    final_risk_score: float
    notes: Optional[str] = None


def _raise_for_error(result: Dict[str, Any]) -> None:
    if "error" in result:
        status_code = 404 if result["error"].endswith("not found") else 400
        raise HTTPException(status_code=status_code, detail=result["error"])


@router.post("", status_code=201)
async def create_intervention(request_data: InterventionCreate, db: Session = Depends(get_session)) -> Dict[str, Any]:
    result = intervention_service.create_intervention(request_data.model_dump(), db)
    _raise_for_error(result)
    return result["intervention"].model_dump()


@router.get("/student/{student_id}")
async def get_student_interventions(student_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    interventions = intervention_service.get_for_student(student_id, db)
    return {"interventions": [i.model_dump() for i in interventions], "total": len(interventions)}


@router.get("/teacher/{teacher_id}")
async def get_teacher_interventions(teacher_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    result = intervention_service.get_by_teacher(teacher_id, db)
    _raise_for_error(result)
    interventions = result["interventions"]
    return {"interventions": [i.model_dump() for i in interventions], "total": len(interventions)}


@router.patch("/{intervention_id}/status")
async def update_intervention_status(
    intervention_id: int, request_data: StatusUpdate, db: Session = Depends(get_session)
) -> Dict[str, Any]:
    result = intervention_service.update_status(intervention_id, request_data.status, db, request_data.notes)
    _raise_for_error(result)
    return result["intervention"].model_dump()


@router.post("/{intervention_id}/complete")
async def complete_intervention(
    intervention_id: int, request_data: CompletionRequest, db: Session = Depends(get_session)
) -> Dict[str, Any]:
    """
    Complete an intervention and record its effectiveness.
    """
    result = intervention_service.complete(intervention_id, request_data.final_risk_score, db, request_data.notes)
    _raise_for_error(result)
    return {"intervention": result["intervention"].model_dump(), "effectiveness": result["effectiveness"]}

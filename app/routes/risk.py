"""
Risk assessment API routes.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database.session import get_session, get_session_factory
from app.services.risk_service import STUDENT_NOT_FOUND, risk_service
from worker.risk_tasks import recalculate_all_risks as recalculate_all_risks_task

router = APIRouter(prefix="/api/risk", tags=["risk"])
logger = logging.getLogger("app.risk")


class EnsembleWeights(BaseModel):
    rule_based: float = 0.15
    ml_based: float = 0.25
    holistic: float = 0.20
    ml_holistic: float = 0.40


def _raise_for_error(result: Dict[str, Any]) -> None:
    if "error" in result:
        status_code = 404 if result["error"] == STUDENT_NOT_FOUND else 400
        raise HTTPException(status_code=status_code, detail=result["error"])


@router.get("/high-risk")
async def get_high_risk_students(db: Session = Depends(get_session)) -> Dict[str, Any]:
    """Students whose latest assessment is high risk."""
    assessments = risk_service.get_high_risk_students(db)
    return {"assessments": [a.model_dump() for a in assessments], "total": len(assessments)}


@router.post("/recalculate-all")
def recalculate_all_risks(session_factory=Depends(get_session_factory)) -> Dict[str, Any]:
    """
    Recalculate risk for all students and wait for the result.

    Runs in the threadpool, off the event loop. Only counts and failed student IDs
    are returned; failure details stay in the logs.
    """
    try:
        result = risk_service.recalculate_all(session_factory)
    except Exception as e:
        logger.error(f"Error recalculating risks: {e}")
        raise HTTPException(status_code=500, detail="Risk recalculation failed")

    failed = [error["student_id"] for error in result["errors"]]
    return {
        "message": f"Recalculated risk scores for {result['count']} students",
        "count": result["count"],
        "failed": len(failed),
        "errors": failed,
    }


@router.post("/recalculate-all/schedule", status_code=202)
async def schedule_recalculate_all() -> Dict[str, Any]:
    """Queue a recalculation of all students on the risk worker."""
    try:
        task = recalculate_all_risks_task.delay()
    except Exception as e:
        logger.error(f"Error scheduling risk recalculation: {e}")
        raise HTTPException(status_code=503, detail="Risk worker unavailable")

    logger.info(f"Risk recalculation scheduled, task: {task.id}")
    return {
        "status": "processing",
        "task_id": task.id,
        "message": "Risk recalculation started in the background",
    }


@router.post("/{student_id}/calculate")
async def calculate_risk(
    student_id: str,
    mode: Optional[str] = Query(default=None, description="combined or ensemble"),
    db: Session = Depends(get_session)
) -> Dict[str, Any]:
    """
    Calculate and store a new risk assessment.

    Args:
        student_id: Student ID
        mode: Scoring mode override
        db: Database session

    Returns:
        Stored assessment with ensemble and trend details
    """
    result = risk_service.calculate_risk(student_id, db, mode)
    _raise_for_error(result)

    outcome = result["outcome"]
    return {
        "assessment": result["assessment"].model_dump(),
        "ensemble": outcome.ensemble.to_dict(),
        "temporal": outcome.temporal.to_dict(),
        "algorithm_scores": {key: r.risk_score for key, r in outcome.algorithm_results.items()},
    }


@router.get("/{student_id}/latest")
async def get_latest_assessment(student_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    """Latest assessment, or a pending status when none has been calculated yet."""
    latest = risk_service.get_latest(student_id, db)
    if not latest:
        return {"status": "pending", "assessment": None}
    return {"status": "calculated", "assessment": latest.model_dump()}


@router.get("/{student_id}/history")
async def get_assessment_history(
    student_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_session)
) -> Dict[str, Any]:
    history = risk_service.get_history(student_id, db, limit)
    return {"assessments": [a.model_dump() for a in history], "total": len(history)}


@router.get("/{student_id}/trend")
async def get_temporal_trend(student_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    result = risk_service.get_temporal_trend(student_id, db)
    _raise_for_error(result)
    return result


@router.get("/{student_id}/compare")
async def compare_algorithms(student_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    """Three-way algorithm comparison."""
    result = risk_service.compare_algorithms(student_id, db)
    _raise_for_error(result)
    return result


@router.post("/{student_id}/compare-all")
async def compare_all_algorithms(
    student_id: str,
    weights: Optional[EnsembleWeights] = None,
    db: Session = Depends(get_session)
) -> Dict[str, Any]:
    """Four-way algorithm comparison with weighted ensemble."""
    result = risk_service.compare_all_algorithms(student_id, db, weights.model_dump() if weights else None)
    _raise_for_error(result)
    return result


@router.get("/{student_id}/enhanced")
async def calculate_enhanced_risk(student_id: str, db: Session = Depends(get_session)) -> Dict[str, Any]:
    """Ensemble score adjusted for the recent trend; nothing is stored."""
    result = risk_service.calculate_enhanced_risk(student_id, db)
    _raise_for_error(result)
    return result

"""
Celery tasks for risk recalculation.
"""
import logging
from typing import Any, Dict

from celery import group

from app.database.session import get_db_session
from app.models.student import Student
from app.services.config_service import config_service
from app.services.risk_service import risk_service

from worker.celery_app import celery_app

logger = logging.getLogger("worker.risk_tasks")


@celery_app.task(bind=True, name="risk.calculate_student_risk")
def calculate_student_risk(self, student_id: str) -> Dict[str, Any]:
    """
    Calculate and store a risk assessment for one student.

    Args:
        student_id: Student ID

    Returns:
        Dictionary with status and score
    """
    logger.info(f"Starting risk calculation for student: {student_id}")

    try:
        with get_db_session() as db:
            result = risk_service.calculate_risk(student_id, db)

            if "error" in result:
                logger.warning(f"Risk calculation failed for student {student_id}: {result['error']}")
                return {"status": "failed", "student_id": student_id, "error": result["error"]}

            outcome = result["outcome"]
            return {
                "status": "success",
                "student_id": student_id,
                "risk_score": outcome.risk_score,
                "risk_level": outcome.risk_level.value,
                "trend_direction": outcome.trend_direction,
            }

    except Exception as e:
        logger.error(f"Error calculating risk for student {student_id}: {e}")
        return {"status": "failed", "student_id": student_id, "error": str(e)}


@celery_app.task(bind=True, name="risk.recalculate_all_risks")
def recalculate_all_risks(self) -> Dict[str, Any]:
    """
    Fan out one risk calculation task per student.

    Each student appears once per run, so no two tasks of the same run
    write history for the same student.

    Returns:
        Dictionary with the number of dispatched tasks
    """
    logger.info("Starting periodic risk recalculation")

    try:
        with get_db_session() as db:
            student_ids = sorted({row[0] for row in db.query(Student.id).all()})

        if student_ids:
            group(calculate_student_risk.s(student_id) for student_id in student_ids).apply_async()

        logger.info(f"Dispatched risk recalculation for {len(student_ids)} students")
        return {
            "status": "success",
            "dispatched": len(student_ids),
            "timestamp": config_service.now().isoformat()
        }

    except Exception as e:
        logger.error(f"Error in recalculate_all_risks: {e}")
        return {
            "status": "error",
            "error": str(e),
            "timestamp": config_service.now().isoformat()
        }

"""
Admin API routes.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database.session import get_session
from app.services.admin_service import AdminService

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger("app.admin")

admin_service = AdminService()


@router.get("/statistics")
async def get_statistics(db: Session = Depends(get_session)) -> Dict[str, Any]:
    """System statistics for the admin dashboard."""
    return admin_service.get_statistics(db)


@router.post("/clear")
async def clear_database(db: Session = Depends(get_session)) -> Dict[str, Any]:
    """
    Wipe students, assessment history and interventions.
    """
    logger.warning("Bulk clear of all student data requested")
    try:
        return admin_service.clear_all(db)
    except Exception as e:
        logger.error(f"Error clearing database: {e}")
        raise HTTPException(status_code=500, detail="Failed to clear database")

"""
Risk assessment history model.
"""
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.student import Student


class RiskAssessment(SQLModel, table=True):
    """
    One computed risk assessment.

    Assessments are append-only: each calculation inserts a new row and the
    latest row for a student is the one with the greatest created_at (then id).
    """

    __tablename__ = "risk_assessments"

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: str = Field(foreign_key="students.id", index=True)
    risk_level: str = Field(max_length=20, index=True)  # low, moderate, high
    risk_score: float = Field(description="Risk score 0-100")

    # Contributing factors
    academic_risk: float = Field()
    attendance_risk: float = Field()
    engagement_risk: float = Field()
    financial_risk: float = Field()
    social_risk: float = Field()

    recommendations: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    predicted_dropout_probability: float = Field(description="Equal to risk_score")

    # Trend data
    trend_direction: str = Field(default="stable", max_length=20)  # improving, stable, declining
    previous_score: Optional[float] = Field(default=None)

    # Scoring metadata
    scoring_mode: str = Field(default="combined", max_length=20)
    ensemble_score: Optional[float] = Field(default=None)
    ensemble_confidence: Optional[float] = Field(default=None)
    algorithm_agreement: Optional[str] = Field(default=None, max_length=20)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    student: Optional["Student"] = Relationship(back_populates="risk_assessments")

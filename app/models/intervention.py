"""
Teacher intervention model.
"""
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.student import Student

INTERVENTION_STATUSES = ("planned", "in-progress", "completed", "cancelled")


class Intervention(SQLModel, table=True):
    """Support action planned by a teacher for a student."""

    __tablename__ = "interventions"

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: str = Field(foreign_key="students.id", index=True)
    teacher_id: str = Field(max_length=50, index=True)
    title: str = Field(max_length=255)
    description: str = Field(default="", max_length=2000)
    type: str = Field(max_length=30)  # mentoring, tutoring, counseling, assignment
    status: str = Field(default="planned", max_length=20, index=True)
    priority: str = Field(default="medium", max_length=10)  # low, medium, high

    due_date: Optional[datetime] = Field(default=None)
    completed_date: Optional[datetime] = Field(default=None)

    # Effectiveness tracking
    initial_risk_score: float = Field()
    final_risk_score: Optional[float] = Field(default=None)
    effectiveness: Optional[float] = Field(default=None, description="0-100")

    notes: Optional[str] = Field(default=None, max_length=2000)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    student: Optional["Student"] = Relationship(back_populates="interventions")

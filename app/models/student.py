"""
Student profile model with the metrics read by the risk engine.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import Field, Relationship, SQLModel


class Student(SQLModel, table=True):
    """Student profile and current academic/behavioral/financial metrics."""

    __tablename__ = "students"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32)
    full_name: str = Field(max_length=255)
    student_number: str = Field(max_length=50, unique=True, index=True)  # school-issued ID
    grade: Optional[str] = Field(default=None, max_length=20)
    section: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = Field(default=None, max_length=255)
    assigned_teacher_id: Optional[str] = Field(default=None, max_length=50, index=True)

    # Academic
    cgpa: float = Field(default=7.0)  # 0-10
    assignment_completion_rate: float = Field(default=80.0)
    test_score_average: float = Field(default=75.0)

    # Attendance
    attendance_rate: float = Field(default=90.0)
    total_absences: int = Field(default=0)
    tardiness_count: int = Field(default=0)

    # Engagement
    login_frequency: float = Field(default=5.0)  # logins per week
    class_participation_score: float = Field(default=70.0)
    challenge_completion_rate: float = Field(default=0.0)

    # Financial
    fee_payment_status: str = Field(default="current", max_length=20)  # current, delayed, overdue
    has_scholarship: bool = Field(default=False)

    # Streaks (days)
    current_streak: int = Field(default=0)
    longest_streak: int = Field(default=0)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_assessed_at: Optional[datetime] = Field(default=None)

    # Relationships
    risk_assessments: List["RiskAssessment"] = Relationship(back_populates="student")
    interventions: List["Intervention"] = Relationship(back_populates="student")


from app.models.intervention import Intervention  # noqa: E402
from app.models.risk import RiskAssessment  # noqa: E402

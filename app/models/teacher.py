"""
Teacher profile model.
"""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Teacher(SQLModel, table=True):
    """Teacher profile with intervention outcome counters."""

    __tablename__ = "teachers"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32)
    full_name: str = Field(max_length=255)
    teacher_number: str = Field(max_length=50, unique=True, index=True)  # school-issued ID
    department: str = Field(default="", max_length=100)
    subjects: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    email: Optional[str] = Field(default=None, max_length=255)

    # Completed interventions, and those that cut risk by more than half
    interventions_completed: int = Field(default=0)
    successful_interventions: int = Field(default=0)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

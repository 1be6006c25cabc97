"""
Pytest configuration and fixtures for RetentionPulse tests.
"""

import os
import tempfile
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.database.session import get_session, get_session_factory
from app.main import app
from app.models.student import Student
from app.models.teacher import Teacher
from app.scoring.metrics import FeePaymentStatus, StudentMetrics
from app.services.config_service import config_service

AT_RISK_METRICS = {
    "cgpa": 3.0,
    "assignment_completion_rate": 40,
    "test_score_average": 35,
    "attendance_rate": 55,
    "login_frequency": 1,
    "class_participation_score": 20,
    "challenge_completion_rate": 10,
    "fee_payment_status": "overdue",
    "total_absences": 15,
    "tardiness_count": 8,
    "has_scholarship": False,
    "current_streak": 0,
    "longest_streak": 0,
}

MODEL_STUDENT_METRICS = {
    "cgpa": 9.5,
    "assignment_completion_rate": 98,
    "test_score_average": 95,
    "attendance_rate": 99,
    "login_frequency": 7,
    "class_participation_score": 95,
    "challenge_completion_rate": 90,
    "fee_payment_status": "current",
    "has_scholarship": True,
}


@pytest.fixture
def at_risk_metrics():
    """Snapshot of a struggling student with overdue fees."""
    return StudentMetrics.from_record(AT_RISK_METRICS)


@pytest.fixture
def model_student_metrics():
    """Snapshot of a high-performing student on a scholarship."""
    return StudentMetrics.from_record(MODEL_STUDENT_METRICS)


@pytest.fixture
def worst_case_metrics():
    """Every risk factor at its maximum."""
    return StudentMetrics(
        cgpa=0,
        assignment_completion_rate=0,
        test_score_average=0,
        attendance_rate=0,
        total_absences=50,
        tardiness_count=20,
        login_frequency=0,
        class_participation_score=0,
        challenge_completion_rate=0,
        fee_payment_status=FeePaymentStatus.OVERDUE,
    )


@pytest.fixture(autouse=True)
def reset_config():
    """Drop cached settings between tests."""
    config_service.clear_cache()
    yield
    config_service.clear_cache()


@pytest.fixture
def test_engine():
    """Create an engine on a temporary SQLite file for each test."""
    fd, temp_db = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_engine(f"sqlite:///{temp_db}", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(bind=engine)

    yield engine

    engine.dispose()
    try:
        os.unlink(temp_db)
    except OSError:
        pass


@pytest.fixture
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def isolated_db_session(session_factory):
    """Create an isolated database session for each test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(isolated_db_session, session_factory):
    """Create a test client with database dependency overrides."""

    def override_get_session():
        try:
            yield isolated_db_session
        finally:
            pass

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_student(isolated_db_session):
    """Factory creating stored students with the given metrics."""

    def _make_student(**metrics):
        suffix = uuid.uuid4().hex[:8]
        student = Student(
            id=f"student_{suffix}",
            full_name=f"Test Student {suffix}",
            student_number=f"S-{suffix}",
            grade="10",
            **metrics,
        )
        isolated_db_session.add(student)
        isolated_db_session.commit()
        isolated_db_session.refresh(student)
        return student

    return _make_student


@pytest.fixture
def at_risk_student(make_student):
    return make_student(**AT_RISK_METRICS)


@pytest.fixture
def model_student(make_student):
    return make_student(**MODEL_STUDENT_METRICS)


@pytest.fixture
def model_student_values():
    """Raw metric values of a high-performing student."""
    return dict(MODEL_STUDENT_METRICS)


@pytest.fixture
def make_teacher(isolated_db_session):
    """Factory creating stored teacher profiles."""

    def _make_teacher(**fields):
        suffix = uuid.uuid4().hex[:8]
        teacher = Teacher(
            id=f"teacher_{suffix}",
            full_name=fields.pop("full_name", f"Test Teacher {suffix}"),
            teacher_number=fields.pop("teacher_number", f"T-{suffix}"),
            department=fields.pop("department", "Science"),
            **fields,
        )
        isolated_db_session.add(teacher)
        isolated_db_session.commit()
        isolated_db_session.refresh(teacher)
        return teacher

    return _make_teacher


@pytest.fixture
def teacher(make_teacher):
    return make_teacher()

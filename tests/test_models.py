"""
Tests for data models.
"""
from sqlalchemy import inspect

from app.database.init_db import init_database
from app.models.intervention import Intervention
from app.models.risk import RiskAssessment
from app.models.student import Student


class TestStudentModel:
    """Test Student model."""

    def test_student_defaults(self, isolated_db_session):
        """Test metric defaults of a new profile."""
        student = Student(id="student_001", full_name="Ana Reyes", student_number="2024-001")
        isolated_db_session.add(student)
        isolated_db_session.commit()

        retrieved = isolated_db_session.query(Student).filter(Student.id == "student_001").first()

        assert retrieved is not None
        assert retrieved.fee_payment_status == "current"
        assert retrieved.has_scholarship is False
        assert retrieved.total_absences == 0
        assert retrieved.created_at is not None

    def test_relationships(self, isolated_db_session, at_risk_student):
        """Test assessments and interventions hang off the student."""
        isolated_db_session.add(RiskAssessment(
            student_id=at_risk_student.id, risk_level="high", risk_score=80.0,
            academic_risk=70.0, attendance_risk=60.0, engagement_risk=50.0,
            financial_risk=80.0, social_risk=40.0, recommendations=["Discuss financial aid options"],
            predicted_dropout_probability=80.0,
        ))
        isolated_db_session.add(Intervention(
            student_id=at_risk_student.id, teacher_id="t1", title="Tutoring",
            type="tutoring", initial_risk_score=80.0,
        ))
        isolated_db_session.commit()
        isolated_db_session.refresh(at_risk_student)

        assert len(at_risk_student.risk_assessments) == 1
        assert at_risk_student.risk_assessments[0].recommendations == ["Discuss financial aid options"]
        assert len(at_risk_student.interventions) == 1
        assert at_risk_student.interventions[0].student.id == at_risk_student.id


class TestRiskAssessmentModel:
    """Test RiskAssessment model."""

    def test_defaults(self, isolated_db_session, at_risk_student):
        assessment = RiskAssessment(
            student_id=at_risk_student.id, risk_level="low", risk_score=10.0,
            academic_risk=10.0, attendance_risk=10.0, engagement_risk=10.0,
            financial_risk=20.0, social_risk=10.0, predicted_dropout_probability=10.0,
        )
        isolated_db_session.add(assessment)
        isolated_db_session.commit()
        isolated_db_session.refresh(assessment)

        assert assessment.recommendations == []
        assert assessment.trend_direction == "stable"
        assert assessment.previous_score is None
        assert assessment.scoring_mode == "combined"


class TestInitDatabase:
    """Test table creation."""

    def test_init_database(self):
        from sqlalchemy import create_engine

        engine = create_engine("sqlite://")
        init_database(engine)

        tables = set(inspect(engine).get_table_names())
        assert {"students", "risk_assessments", "interventions", "teachers"} <= tables

"""Create student, risk assessment and intervention tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('students',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('student_number', sa.String(length=50), nullable=False),
        sa.Column('grade', sa.String(length=20), nullable=True),
        sa.Column('section', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('assigned_teacher_id', sa.String(length=50), nullable=True),
        sa.Column('cgpa', sa.Float(), nullable=False),
        sa.Column('assignment_completion_rate', sa.Float(), nullable=False),
        sa.Column('test_score_average', sa.Float(), nullable=False),
        sa.Column('attendance_rate', sa.Float(), nullable=False),
        sa.Column('total_absences', sa.Integer(), nullable=False),
        sa.Column('tardiness_count', sa.Integer(), nullable=False),
        sa.Column('login_frequency', sa.Float(), nullable=False),
        sa.Column('class_participation_score', sa.Float(), nullable=False),
        sa.Column('challenge_completion_rate', sa.Float(), nullable=False),
        sa.Column('fee_payment_status', sa.String(length=20), nullable=False),
        sa.Column('has_scholarship', sa.Boolean(), nullable=False),
        sa.Column('current_streak', sa.Integer(), nullable=False),
        sa.Column('longest_streak', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_students_student_number'), 'students', ['student_number'], unique=True)
    op.create_index(op.f('ix_students_assigned_teacher_id'), 'students', ['assigned_teacher_id'], unique=False)

    op.create_table('risk_assessments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.String(), nullable=False),
        sa.Column('risk_level', sa.String(length=20), nullable=False),
        sa.Column('risk_score', sa.Float(), nullable=False),
        sa.Column('academic_risk', sa.Float(), nullable=False),
        sa.Column('attendance_risk', sa.Float(), nullable=False),
        sa.Column('engagement_risk', sa.Float(), nullable=False),
        sa.Column('financial_risk', sa.Float(), nullable=False),
        sa.Column('social_risk', sa.Float(), nullable=False),
        sa.Column('recommendations', sa.JSON(), nullable=False),
        sa.Column('predicted_dropout_probability', sa.Float(), nullable=False),
        sa.Column('trend_direction', sa.String(length=20), nullable=False),
        sa.Column('previous_score', sa.Float(), nullable=True),
        sa.Column('scoring_mode', sa.String(length=20), nullable=False),
        sa.Column('ensemble_score', sa.Float(), nullable=True),
        sa.Column('ensemble_confidence', sa.Float(), nullable=True),
        sa.Column('algorithm_agreement', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_risk_assessments_student_id'), 'risk_assessments', ['student_id'], unique=False)
    op.create_index(op.f('ix_risk_assessments_risk_level'), 'risk_assessments', ['risk_level'], unique=False)
    op.create_index(op.f('ix_risk_assessments_created_at'), 'risk_assessments', ['created_at'], unique=False)

    op.create_table('interventions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.String(), nullable=False),
        sa.Column('teacher_id', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(length=2000), nullable=False),
        sa.Column('type', sa.String(length=30), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=10), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
        sa.Column('initial_risk_score', sa.Float(), nullable=False),
        sa.Column('final_risk_score', sa.Float(), nullable=True),
        sa.Column('effectiveness', sa.Float(), nullable=True),
        sa.Column('notes', sa.String(length=2000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_interventions_student_id'), 'interventions', ['student_id'], unique=False)
    op.create_index(op.f('ix_interventions_teacher_id'), 'interventions', ['teacher_id'], unique=False)
    op.create_index(op.f('ix_interventions_status'), 'interventions', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_interventions_status'), table_name='interventions')
    op.drop_index(op.f('ix_interventions_teacher_id'), table_name='interventions')
    op.drop_index(op.f('ix_interventions_student_id'), table_name='interventions')
    op.drop_table('interventions')
    op.drop_index(op.f('ix_risk_assessments_created_at'), table_name='risk_assessments')
    op.drop_index(op.f('ix_risk_assessments_risk_level'), table_name='risk_assessments')
    op.drop_index(op.f('ix_risk_assessments_student_id'), table_name='risk_assessments')
    op.drop_table('risk_assessments')
    op.drop_index(op.f('ix_students_assigned_teacher_id'), table_name='students')
    op.drop_index(op.f('ix_students_student_number'), table_name='students')
    op.drop_table('students')

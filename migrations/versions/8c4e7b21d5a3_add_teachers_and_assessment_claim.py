"""Add teachers table and students.last_assessed_at

Revision ID: 8c4e7b21d5a3
Revises: 3f1c2a9d7b10
Create Date: 2026-10-25 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4e7b21d5a3'
down_revision: Union[str, None] = '3f1c2a9d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('teachers',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('teacher_number', sa.String(length=50), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('subjects', sa.JSON(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('interventions_completed', sa.Integer(), nullable=False),
        sa.Column('successful_interventions', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_teachers_teacher_number'), 'teachers', ['teacher_number'], unique=True)

    with op.batch_alter_table('students') as batch_op:
        batch_op.add_column(sa.Column('last_assessed_at', sa.DateTime(), nullable=True))


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table('students') as batch_op:
        batch_op.drop_column('last_assessed_at')

    op.drop_index(op.f('ix_teachers_teacher_number'), table_name='teachers')
    op.drop_table('teachers')

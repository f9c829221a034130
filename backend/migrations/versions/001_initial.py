"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the database tables for the Student Registry:
- students: Student records with unique email, phone and student ID
- asset_cleanup_tasks: Queued photo deletions awaiting retry

The unique constraints on students are what finally enforce identity
uniqueness when two writes race past the application-level check.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Students Table ────────────────────────────────────────
    op.create_table(
        'students',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('phone', sa.String(10), nullable=False),
        sa.Column('student_id', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('subjects', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('asset_ref', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('email', name='uq_students_email'),
        sa.UniqueConstraint('phone', name='uq_students_phone'),
        sa.UniqueConstraint('student_id', name='uq_students_student_id'),
    )

    # ── Asset Cleanup Tasks Table ─────────────────────────────
    op.create_table(
        'asset_cleanup_tasks',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('asset_ref', sa.Text(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False, server_default=''),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('last_attempt_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
    )

    op.create_index('ix_asset_cleanup_tasks_created_at', 'asset_cleanup_tasks', ['created_at'])


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_index('ix_asset_cleanup_tasks_created_at', table_name='asset_cleanup_tasks')
    op.drop_table('asset_cleanup_tasks')
    op.drop_table('students')

"""Baseline migration - users and appointments

Revision ID: 0001_baseline
Revises: 
Create Date: 2026-10-18

Creates the user table (with GoHighLevel identity columns) and the
locally stored appointments owned by those users.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and appointments tables."""

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), server_default=sa.text("'SURVEYOR'"), nullable=False),
        sa.Column('status', sa.String(20), server_default=sa.text("'ACTIVE'"), nullable=False),
        sa.Column('ghl_user_id', sa.String(100), nullable=True),
        sa.Column('ghl_team_id', sa.String(100), nullable=True),
        sa.Column('token_version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('ghl_user_id'),
    )
    op.create_index('idx_users_role', 'users', ['role'])

    # ==========================================================================
    # Appointments
    # ==========================================================================
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(50), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=True),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('status', sa.String(20), server_default=sa.text("'SCHEDULED'"), nullable=False),
        sa.Column('source_channel', sa.String(20), server_default=sa.text("'MANUAL'"), nullable=False),
        sa.Column('ghl_appointment_id', sa.String(100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_appointments_user_date', 'appointments', ['user_id', 'scheduled_at'])
    op.create_index('idx_appointments_ghl', 'appointments', ['ghl_appointment_id'])


def downgrade() -> None:
    """Drop appointments and users tables."""
    op.drop_index('idx_appointments_ghl', table_name='appointments')
    op.drop_index('idx_appointments_user_date', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('idx_users_role', table_name='users')
    op.drop_table('users')

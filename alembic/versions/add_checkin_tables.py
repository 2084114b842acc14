"""add checkin_config and checkin_records tables

Revision ID: add_checkin_tables
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = 'add_checkin_tables'
down_revision = None  # users and logs are created by the gateway's own migrations
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the check-in ledger and its settings row."""
    op.create_table(
        'checkin_config',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('enabled', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('min_quota', sa.Integer, nullable=False, server_default='100'),
        sa.Column('max_quota', sa.Integer, nullable=False, server_default='100'),
        sa.Column('checkin_code_enabled', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('checkin_code', sa.String(20), nullable=False, server_default=''),
        sa.Column('consecutive_reward_enabled', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('consecutive_reward_quota', sa.Integer, nullable=False, server_default='50'),
        sa.Column('calendar_enabled', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'checkin_records',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('quota', sa.Integer, nullable=False, server_default='0', comment='Granted quota, bonus included'),
        sa.Column('checkin_date', sa.String(10), nullable=False, index=True, comment='YYYY-MM-DD'),
        sa.Column('checkin_code', sa.String(20), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    # One check-in per user per day
    op.create_unique_constraint('uq_checkin_user_date', 'checkin_records', ['user_id', 'checkin_date'])

    op.create_index('ix_checkin_user_created', 'checkin_records', ['user_id', 'created_at'])


def downgrade() -> None:
    """Drop the check-in tables."""
    op.drop_index('ix_checkin_user_created', table_name='checkin_records')
    op.drop_constraint('uq_checkin_user_date', 'checkin_records')
    op.drop_table('checkin_records')
    op.drop_table('checkin_config')

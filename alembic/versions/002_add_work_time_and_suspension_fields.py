"""add work time and suspension fields to users

Revision ID: 002
Revises: 001
Create Date: 2026-10-02 15:40:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('users', sa.Column('daily_work_minutes', sa.Float(), nullable=False, server_default='0'))
    op.add_column('users', sa.Column('last_active_time', sa.DateTime(), nullable=True))
    op.add_column('users', sa.Column('daily_work_reset_at', sa.DateTime(), nullable=True))
    op.add_column('users', sa.Column('consecutive_failed_days', sa.Integer(), nullable=False, server_default='0'))
    op.add_column('users', sa.Column('last_compliance_date', sa.Date(), nullable=True))
    op.add_column('users', sa.Column('suspended_at', sa.DateTime(), nullable=True))
    op.add_column('users', sa.Column('suspension_reason', sa.String(), nullable=True))
    op.add_column('users', sa.Column('reactivation_fee_paid', sa.Boolean(), nullable=False, server_default='false'))
    op.add_column('users', sa.Column('reactivation_fee_amount', sa.Numeric(8, 2), nullable=False, server_default='49.00'))


def downgrade() -> None:
    op.drop_column('users', 'reactivation_fee_amount')
    op.drop_column('users', 'reactivation_fee_paid')
    op.drop_column('users', 'suspension_reason')
    op.drop_column('users', 'suspended_at')
    op.drop_column('users', 'last_compliance_date')
    op.drop_column('users', 'consecutive_failed_days')
    op.drop_column('users', 'daily_work_reset_at')
    op.drop_column('users', 'last_active_time')
    op.drop_column('users', 'daily_work_minutes')

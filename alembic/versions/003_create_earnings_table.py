"""create earnings table

Revision ID: 003
Revises: 002
Create Date: 2026-10-03 09:05:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '003'
down_revision: Union[str, None] = '002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'earnings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(8, 2), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index(op.f('ix_earnings_id'), 'earnings', ['id'], unique=False)
    op.create_index(op.f('ix_earnings_user_id'), 'earnings', ['user_id'], unique=False)
    op.create_index(op.f('ix_earnings_type'), 'earnings', ['type'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_earnings_type'), table_name='earnings')
    op.drop_index(op.f('ix_earnings_user_id'), table_name='earnings')
    op.drop_index(op.f('ix_earnings_id'), table_name='earnings')
    op.drop_table('earnings')

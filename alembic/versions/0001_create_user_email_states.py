"""create user email states

Revision ID: 0001createuseremailstates
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001createuseremailstates'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'user_email_states',
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('current_email', sa.String(length=254), nullable=False),
        sa.Column('pending_email', sa.String(length=254), nullable=True),
        sa.Column('token', sa.String(length=128), nullable=True),
        sa.Column('token_issued_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('token_purpose', sa.String(length=32), nullable=True),
        sa.Column('last_change_from', sa.String(length=254), nullable=True),
        sa.Column('last_change_to', sa.String(length=254), nullable=True),
        sa.Column('last_change_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('email_changed_on_last_save', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index('ix_user_email_states_token', 'user_email_states', ['token'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_user_email_states_token', table_name='user_email_states')
    op.drop_table('user_email_states')

"""add_case_subscriptions_and_error_logs

Revision ID: c4s3sub0001
Revises:
Create Date: 2025-03-02 14:21:09.318402

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c4s3sub0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'case_subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('case_id', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('subscription_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('case_id', 'email', name='uq_case_subscriptions_case_email'),
    )
    op.create_index('ix_case_subscriptions_id', 'case_subscriptions', ['id'])
    op.create_index('ix_case_subscriptions_case_id', 'case_subscriptions', ['case_id'])
    op.create_index('ix_case_subscriptions_email', 'case_subscriptions', ['email'])

    op.create_table(
        'error_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('severity', sa.Enum('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', name='errorseverity'), nullable=False),
        sa.Column('error_type', sa.String(100), nullable=False),
        sa.Column('error_code', sa.String(50), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('stack_trace', sa.Text(), nullable=True),
        sa.Column('request_data', sa.Text(), nullable=True),
        sa.Column('endpoint', sa.String(200), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_error_logs_id', 'error_logs', ['id'])
    op.create_index('ix_error_logs_severity', 'error_logs', ['severity'])
    op.create_index('ix_error_logs_error_type', 'error_logs', ['error_type'])
    op.create_index('ix_error_logs_endpoint', 'error_logs', ['endpoint'])
    op.create_index('ix_error_logs_created_at', 'error_logs', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_error_logs_created_at', table_name='error_logs')
    op.drop_index('ix_error_logs_endpoint', table_name='error_logs')
    op.drop_index('ix_error_logs_error_type', table_name='error_logs')
    op.drop_index('ix_error_logs_severity', table_name='error_logs')
    op.drop_index('ix_error_logs_id', table_name='error_logs')
    op.drop_table('error_logs')
    sa.Enum(name='errorseverity').drop(op.get_bind(), checkfirst=True)

    op.drop_index('ix_case_subscriptions_email', table_name='case_subscriptions')
    op.drop_index('ix_case_subscriptions_case_id', table_name='case_subscriptions')
    op.drop_index('ix_case_subscriptions_id', table_name='case_subscriptions')
    op.drop_table('case_subscriptions')

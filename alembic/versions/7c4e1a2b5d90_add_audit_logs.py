"""add_audit_logs

Revision ID: 7c4e1a2b5d90
Revises: 3f2b8c1d9e4a
Create Date: 2026-10-19 16:40:07.214930

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c4e1a2b5d90'
down_revision: Union[str, Sequence[str], None] = '3f2b8c1d9e4a'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


AUDIT_ACTIONS = ('MEMBER_ROLE_CHANGED', 'MEMBER_PERMISSIONS_CHANGED')


def upgrade() -> None:
    """
    Create audit_logs for role and permission changes.

    Actor fields are denormalized, so only the church is a foreign key.
    """
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('church_id', sa.String(length=36), nullable=False),
        sa.Column('branch_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.Enum(*AUDIT_ACTIONS, name='auditaction', native_enum=False), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.String(length=36), nullable=True),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=True),
        sa.Column('user_role', sa.String(length=20), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_church_id', 'audit_logs', ['church_id'])
    op.create_index('ix_audit_logs_church_created', 'audit_logs', ['church_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_church_created', table_name='audit_logs')
    op.drop_index('ix_audit_logs_church_id', table_name='audit_logs')
    op.drop_table('audit_logs')

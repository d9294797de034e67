"""create_church_tenancy_schema

Revision ID: 3f2b8c1d9e4a
Revises:
Create Date: 2026-10-19 10:12:41.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2b8c1d9e4a'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ROLES = ('MEMBER', 'COORDINATOR', 'ADMINFILIAL', 'ADMINGERAL')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Create the multi-tenant church schema.

    Creates:
    - users, churches (one per founder), branches
    - members (one per user) with role
    - permissions (explicit grants per member)
    - onboarding_progress (one per user)
    - finance_entries scoped by church and branch
    """
    # 1. Users
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2. Churches (created_by_user_id unique makes creation idempotent)
    op.create_table(
        'churches',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by_user_id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('created_by_user_id')
    )

    # 3. Branches
    op.create_table(
        'branches',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('church_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_main_branch', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_branches_church_id', 'branches', ['church_id'])

    # 4. Members
    op.create_table(
        'members',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('branch_id', sa.String(length=36), nullable=False),
        sa.Column('church_id', sa.String(length=36), nullable=False),
        sa.Column('role', sa.Enum(*ROLES, name='role', native_enum=False), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.UniqueConstraint('church_id', 'user_id', name='uq_member_church_user')
    )
    op.create_index('ix_members_branch_id', 'members', ['branch_id'])
    op.create_index('ix_members_church_id', 'members', ['church_id'])

    # 5. Permission grants
    op.create_table(
        'permissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('member_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id', 'type', name='uq_permission_member_type')
    )
    op.create_index('ix_permissions_member_id', 'permissions', ['member_id'])

    # 6. Onboarding progress
    op.create_table(
        'onboarding_progress',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('church_configured', sa.Boolean(), nullable=False),
        sa.Column('branches_configured', sa.Boolean(), nullable=False),
        sa.Column('settings_configured', sa.Boolean(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )

    # 7. Finance entries
    op.create_table(
        'finance_entries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('church_id', sa.String(length=36), nullable=False),
        sa.Column('branch_id', sa.String(length=36), nullable=False),
        sa.Column('created_by_member_id', sa.String(length=36), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('type', sa.Enum('ENTRY', 'EXIT', name='financetype', native_enum=False), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by_member_id'], ['members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_finance_entries_church_id', 'finance_entries', ['church_id'])
    op.create_index('ix_finance_entries_church_branch', 'finance_entries', ['church_id', 'branch_id'])


def downgrade() -> None:
    """Drop the church schema in reverse dependency order."""
    op.drop_index('ix_finance_entries_church_branch', table_name='finance_entries')
    op.drop_index('ix_finance_entries_church_id', table_name='finance_entries')
    op.drop_table('finance_entries')
    op.drop_table('onboarding_progress')
    op.drop_index('ix_permissions_member_id', table_name='permissions')
    op.drop_table('permissions')
    op.drop_index('ix_members_church_id', table_name='members')
    op.drop_index('ix_members_branch_id', table_name='members')
    op.drop_table('members')
    op.drop_index('ix_branches_church_id', table_name='branches')
    op.drop_table('branches')
    op.drop_table('churches')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

"""initial_schema

Revision ID: 4c2e9d7b1a53
Revises:
Create Date: 2026-10-18 10:12:41.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c2e9d7b1a53'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Unconstrained NUMERIC; decimal string on SQLite (see app.models.base.ExactDecimal)
EXACT_DECIMAL = sa.Numeric().with_variant(sa.String(length=64), 'sqlite')


def upgrade() -> None:
    """
    Create the multi-tenant schema.

    Creates:
    - tenants (unique domain and subdomain)
    - users (unique email, nullable tenant_id)
    - policies and investments (tenant-scoped records)
    - sessions (server-side login sessions, indexed on user and expiry)
    """
    # 1. Tenants
    op.create_table(
        'tenants',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('domain', sa.String(length=255), nullable=True),
        sa.Column('subdomain', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('domain'),
        sa.UniqueConstraint('subdomain'),
    )

    # 2. Users
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('profile_image_url', sa.String(length=1024), nullable=True),
        sa.Column('tenant_id', sa.String(length=36), nullable=True),
        sa.Column('role', sa.String(length=5), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'], unique=False)

    # 3. Policies
    op.create_table(
        'policies',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.String(length=36), nullable=False),
        sa.Column('provider', sa.String(length=255), nullable=False),
        sa.Column('policy_name', sa.String(length=255), nullable=False),
        sa.Column('policy_number', sa.String(length=255), nullable=True),
        sa.Column('policy_type', sa.String(length=8), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('maturity_date', sa.Date(), nullable=True),
        sa.Column('next_renewal_date', sa.Date(), nullable=True),
        sa.Column('last_premium_date', sa.Date(), nullable=True),
        sa.Column('premium', EXACT_DECIMAL, nullable=True),
        sa.Column('premium_currency', sa.String(length=10), nullable=False),
        sa.Column('premium_frequency', sa.String(length=11), nullable=True),
        sa.Column('nominee', sa.String(length=255), nullable=True),
        sa.Column('beneficiary_type', sa.String(length=8), nullable=True),
        sa.Column('paid_to', sa.String(length=255), nullable=True),
        sa.Column('renewal_status', sa.String(length=50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('document_url', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_policies_tenant_id', 'policies', ['tenant_id'], unique=False)
    op.create_index('ix_policies_tenant_created', 'policies', ['tenant_id', 'created_at'], unique=False)

    # 4. Investments
    op.create_table(
        'investments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=12), nullable=False),
        sa.Column('platform', sa.String(length=255), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('initial_amount', EXACT_DECIMAL, nullable=False),
        sa.Column('current_value', EXACT_DECIMAL, nullable=False),
        sa.Column('shares', EXACT_DECIMAL, nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_investments_tenant_id', 'investments', ['tenant_id'], unique=False)
    op.create_index('ix_investments_tenant_created', 'investments', ['tenant_id', 'created_at'], unique=False)

    # 5. Sessions
    op.create_table(
        'sessions',
        sa.Column('sid', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('sid'),
    )
    op.create_index('ix_sessions_expires_at', 'sessions', ['expires_at'], unique=False)
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop every table created in upgrade()."""
    op.drop_index('ix_sessions_user_id', table_name='sessions')
    op.drop_index('ix_sessions_expires_at', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_investments_tenant_created', table_name='investments')
    op.drop_index('ix_investments_tenant_id', table_name='investments')
    op.drop_table('investments')
    op.drop_index('ix_policies_tenant_created', table_name='policies')
    op.drop_index('ix_policies_tenant_id', table_name='policies')
    op.drop_table('policies')
    op.drop_index('ix_users_tenant_id', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_table('tenants')

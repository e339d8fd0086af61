"""Create users, memberships, subscriptions and coach assignments

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2025-08-24 16:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)
        batch_op.create_index(batch_op.f('ix_users_role'), ['role'], unique=False)

    op.create_table(
        'memberships',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('has_coach', sa.Boolean(), nullable=False),
        sa.Column('has_workout_plan', sa.Boolean(), nullable=False),
        sa.Column('has_nutrition_plan', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_memberships_price_non_negative'),
        sa.CheckConstraint('duration_days > 0', name='ck_memberships_duration_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('memberships', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_memberships_name'), ['name'], unique=False)
        # Catalog listing filters on is_active and sorts by price
        batch_op.create_index('idx_memberships_active_price', ['is_active', 'price'], unique=False)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('membership_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('duration_days', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.CheckConstraint('start_date < end_date', name='ck_subscriptions_date_range'),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.ForeignKeyConstraint(['membership_id'], ['memberships.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('subscriptions', schema=None) as batch_op:
        # Current subscription lookup per member
        batch_op.create_index('idx_subscriptions_member_active', ['member_id', 'is_active'], unique=False)
        # Date range and expiry reporting
        batch_op.create_index('idx_subscriptions_dates', ['start_date', 'end_date'], unique=False)
        batch_op.create_index('idx_subscriptions_active_end_date', ['is_active', 'end_date'], unique=False)
        batch_op.create_index('idx_subscriptions_membership_id', ['membership_id'], unique=False)

    op.create_table(
        'coach_members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('coach_id', 'member_id', name='uq_coach_members_pair'),
    )
    with op.batch_alter_table('coach_members', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_coach_members_coach_id'), ['coach_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_coach_members_member_id'), ['member_id'], unique=False)


def downgrade():
    with op.batch_alter_table('coach_members', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_coach_members_member_id'))
        batch_op.drop_index(batch_op.f('ix_coach_members_coach_id'))
    op.drop_table('coach_members')

    with op.batch_alter_table('subscriptions', schema=None) as batch_op:
        batch_op.drop_index('idx_subscriptions_membership_id')
        batch_op.drop_index('idx_subscriptions_active_end_date')
        batch_op.drop_index('idx_subscriptions_dates')
        batch_op.drop_index('idx_subscriptions_member_active')
    op.drop_table('subscriptions')

    with op.batch_alter_table('memberships', schema=None) as batch_op:
        batch_op.drop_index('idx_memberships_active_price')
        batch_op.drop_index(batch_op.f('ix_memberships_name'))
    op.drop_table('memberships')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_users_role'))
        batch_op.drop_index(batch_op.f('ix_users_email'))
    op.drop_table('users')

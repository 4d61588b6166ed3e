"""Initial migration

Revision ID: 001
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create tenants table
    op.create_table(
        'tenants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(100), unique=True, nullable=False),
        sa.Column('description', sa.Text(), default=''),
        sa.Column('address', sa.Text(), default=''),
        sa.Column('phone', sa.String(50), default=''),
        sa.Column('email', sa.String(255), default=''),
        sa.Column('timezone', sa.String(50), default='America/Denver'),
        sa.Column('theme_id', sa.String(100), default='classic-green'),
        sa.Column('home_team_id', sa.String(20)),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create domains table
    op.create_table(
        'domains',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('hostname', sa.String(255), unique=True, nullable=False),
        sa.Column('status', sa.String(20), default='PENDING'),
        sa.Column('is_primary', sa.Boolean(), default=False),
        sa.Column('verified_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create business_hours table
    op.create_table(
        'business_hours',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('open_time', sa.String(5)),
        sa.Column('close_time', sa.String(5)),
        sa.Column('is_closed', sa.Boolean(), default=False),
        sa.UniqueConstraint('tenant_id', 'day_of_week'),
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id')),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column(
            'role',
            sa.Enum('SUPERADMIN', 'OWNER', 'MANAGER', 'STAFF', name='userrole'),
            nullable=False,
            default='STAFF',
        ),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('disabled_at', sa.DateTime()),
        sa.Column('disabled_by', postgresql.UUID(as_uuid=True)),
        sa.Column('disabled_reason', sa.Text()),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create menu tables
    op.create_table(
        'menu_categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), default=''),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    op.create_table(
        'menu_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), default=''),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('image_url', sa.String(500)),
        sa.Column('is_available', sa.Boolean(), default=True),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create specials and special_days tables
    op.create_table(
        'specials',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), default=''),
        sa.Column('price_cents', sa.Integer()),
        sa.Column('original_price_cents', sa.Integer()),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('image_url', sa.String(500)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    op.create_table(
        'special_days',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(200), nullable=False),
        sa.Column('closed', sa.Boolean(), default=True),
        sa.Column('open_time', sa.String(5)),
        sa.Column('close_time', sa.String(5)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.UniqueConstraint('tenant_id', 'date'),
    )

    # Create event tables
    op.create_table(
        'event_types',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('color', sa.String(20)),
        sa.Column('icon', sa.String(50)),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('event_type_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('event_types.id')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), default=''),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('start_time', sa.String(5)),
        sa.Column('end_time', sa.String(5)),
        sa.Column('location', sa.String(255)),
        sa.Column('price', sa.String(50)),
        sa.Column('image_url', sa.String(500)),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('external_id', sa.String(100)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create audit_logs table
    op.create_table(
        'audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True)),
        sa.Column('user_role', sa.String(20)),
        sa.Column('user_email', sa.String(255)),
        sa.Column('user_name', sa.String(255)),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('resource', sa.String(50), nullable=False),
        sa.Column('resource_id', sa.String(100)),
        sa.Column('changes', postgresql.JSON()),
        sa.Column('previous_values', postgresql.JSON()),
        sa.Column('metadata', postgresql.JSON()),
        sa.Column('success', sa.Boolean(), default=True),
        sa.Column('error_message', sa.Text()),
        sa.Column('ip_address', sa.String(50)),
        sa.Column('user_agent', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create health_pings table
    op.create_table(
        'health_pings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('status_code', sa.Integer(), nullable=False),
        sa.Column('response_time_ms', sa.Integer()),
        sa.Column('error', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_domains_tenant_id', 'domains', ['tenant_id'])
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'])
    op.create_index('ix_menu_categories_tenant_id', 'menu_categories', ['tenant_id'])
    op.create_index('ix_menu_items_tenant_id', 'menu_items', ['tenant_id'])
    op.create_index('ix_specials_tenant_id', 'specials', ['tenant_id'])
    op.create_index('ix_events_tenant_id', 'events', ['tenant_id'])
    op.create_index('ix_events_start_date', 'events', ['start_date'])
    op.create_index('ix_audit_logs_tenant_id', 'audit_logs', ['tenant_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])
    op.create_index('ix_health_pings_tenant_id', 'health_pings', ['tenant_id'])
    op.create_index('ix_health_pings_created_at', 'health_pings', ['created_at'])


def downgrade() -> None:
    op.drop_table('health_pings')
    op.drop_table('audit_logs')
    op.drop_table('events')
    op.drop_table('event_types')
    op.drop_table('special_days')
    op.drop_table('specials')
    op.drop_table('menu_items')
    op.drop_table('menu_categories')
    op.drop_table('users')
    op.drop_table('business_hours')
    op.drop_table('domains')
    op.drop_table('tenants')
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)

"""Create users, properties and subscriptions tables

Revision ID: 3c7e91d0a4b2
Revises:
Create Date: 2026-10-18 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c7e91d0a4b2'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('rera_number', sa.String(length=64), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        # Enum columns are stored as their lowercase values, without a native type
        sa.Column('status', sa.String(length=8), nullable=False, server_default='active'),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_users_is_admin', 'users', ['is_admin'])

    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category', sa.String(length=11), nullable=False),
        sa.Column('type', sa.String(length=6), nullable=False),
        sa.Column('status', sa.String(length=8), nullable=False, server_default='pending'),
        sa.Column('building_or_society', sa.String(length=255), nullable=False),
        sa.Column('road_or_location', sa.String(length=255), nullable=False),
        sa.Column('station', sa.String(length=100), nullable=False),
        sa.Column('sub_location', sa.String(length=100), nullable=True),
        sa.Column('property_type', sa.String(length=50), nullable=False),
        sa.Column('is_cosmo', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('possession_date', sa.Date(), nullable=True),
        sa.Column('total_package', sa.Numeric(14, 2), nullable=True),
        sa.Column('brochure_url', sa.String(length=500), nullable=True),
        sa.Column('video_url', sa.String(length=500), nullable=True),
        sa.Column('expected_price', sa.Numeric(14, 2), nullable=True),
        sa.Column('floor_no', sa.String(length=20), nullable=True),
        sa.Column('flat_no', sa.String(length=20), nullable=True),
        sa.Column('contact_name', sa.String(length=255), nullable=True),
        sa.Column('contact_number', sa.String(length=32), nullable=True),
        sa.Column('is_direct', sa.Boolean(), nullable=True),
        sa.Column('rent', sa.Numeric(14, 2), nullable=True),
        sa.Column('deposit', sa.Numeric(14, 2), nullable=True),
        sa.Column('furnishing', sa.String(length=13), nullable=True),
        sa.Column('building_no', sa.String(length=20), nullable=True),
        sa.Column('total_floors', sa.Integer(), nullable=True),
        sa.Column('wing', sa.String(length=20), nullable=True),
        sa.Column('property_age', sa.Integer(), nullable=True),
        sa.Column('parking', sa.String(length=7), nullable=True),
        sa.Column('available_from', sa.Date(), nullable=True),
        sa.Column('ownership', sa.String(length=100), nullable=True),
        sa.Column('master_bedrooms', sa.Integer(), nullable=True),
        sa.Column('admin_remarks', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_by_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_properties_owner_id', 'properties', ['owner_id'])
    op.create_index('idx_properties_category_type_status', 'properties', ['category', 'type', 'status'])
    op.create_index('idx_properties_station_sub_location', 'properties', ['station', 'sub_location'])
    op.create_index('idx_properties_lat_lon', 'properties', ['latitude', 'longitude'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('broker_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'),
                  nullable=False, unique=True),
        sa.Column('locations', sa.JSON(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=8), nullable=False, server_default='pending'),
        sa.Column('payment_status', sa.String(length=9), nullable=False, server_default='pending'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('payment_history', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_subscriptions_status_end_date', 'subscriptions', ['status', 'end_date'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_subscriptions_status_end_date', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('idx_properties_lat_lon', table_name='properties')
    op.drop_index('idx_properties_station_sub_location', table_name='properties')
    op.drop_index('idx_properties_category_type_status', table_name='properties')
    op.drop_index('idx_properties_owner_id', table_name='properties')
    op.drop_table('properties')
    op.drop_index('idx_users_is_admin', table_name='users')
    op.drop_table('users')

"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

Adds:
- users, restaurants, dinner_groups, attendees
- cache_entries for the restaurant cache
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(80), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(120), nullable=True, unique=True),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'restaurants',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('address', sa.String(300), nullable=False),
        sa.Column('cuisine_type', sa.String(50), nullable=False),
        sa.Column('price_level', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('lat', sa.Float(), nullable=False),
        sa.Column('lng', sa.Float(), nullable=False),
        sa.Column('photo_url', sa.String(1000), nullable=True),
        sa.Column('maps_url', sa.String(500), nullable=True),
        sa.Column('website_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    # One dinner group per restaurant
    op.create_table(
        'dinner_groups',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('restaurant_id', sa.String(255),
                  sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    # One attendee row per user
    op.create_table(
        'attendees',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.Integer(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('dinner_group_id', sa.String(36),
                  sa.ForeignKey('dinner_groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', name='unique_attendee_user'),
        sa.UniqueConstraint('user_id', 'dinner_group_id', name='unique_attendee_group'),
    )
    op.create_index('ix_attendees_dinner_group_id', 'attendees', ['dinner_group_id'])

    op.create_table(
        'cache_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.String(500), nullable=False, unique=True),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )


def downgrade():
    op.drop_table('cache_entries')
    op.drop_index('ix_attendees_dinner_group_id', table_name='attendees')
    op.drop_table('attendees')
    op.drop_table('dinner_groups')
    op.drop_table('restaurants')
    op.drop_table('users')

"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - urls table: slug -> long URL mappings with owner and lifecycle flags
    - visits table: one row per redirect served, read by analytics
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'urls' not in existing_tables:
        op.create_table(
            'urls',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('slug', sa.String(length=32), nullable=False),
            sa.Column('long_url', sa.Text(), nullable=False),
            sa.Column('title', sa.String(length=255), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('creator_id', sa.String(length=64), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_urls_slug', 'urls', ['slug'], unique=True)
        op.create_index('ix_urls_created_at', 'urls', ['created_at'])
        op.create_index('ix_urls_creator_id', 'urls', ['creator_id'])

    if 'visits' not in existing_tables:
        op.create_table(
            'visits',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('url_id', sa.Integer(), nullable=False),
            sa.Column('slug', sa.String(length=32), nullable=False),
            sa.Column('visited_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('ip_address', sa.String(length=45), nullable=True),
            sa.Column('referrer', sa.Text(), nullable=True),
            sa.Column('user_agent', sa.String(length=500), nullable=True),
            sa.Column('browser', sa.String(length=100), nullable=True),
            sa.Column('os', sa.String(length=100), nullable=True),
            sa.Column('device_type', sa.String(length=32), nullable=False, server_default='desktop'),
            sa.ForeignKeyConstraint(['url_id'], ['urls.id'], name='fk_visits_url_id'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_visits_url_id', 'visits', ['url_id'])
        op.create_index('ix_visits_slug', 'visits', ['slug'])
        op.create_index('ix_visits_visited_at', 'visits', ['visited_at'])


def downgrade() -> None:
    """
    Drop all tables and indexes.
    """
    op.drop_index('ix_visits_visited_at', table_name='visits')
    op.drop_index('ix_visits_slug', table_name='visits')
    op.drop_index('ix_visits_url_id', table_name='visits')
    op.drop_table('visits')

    op.drop_index('ix_urls_creator_id', table_name='urls')
    op.drop_index('ix_urls_created_at', table_name='urls')
    op.drop_index('ix_urls_slug', table_name='urls')
    op.drop_table('urls')

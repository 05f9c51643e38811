"""baseline_job_board

Revision ID: 7c3e91a0b5d2
Revises:
Create Date: 2026-10-19 10:12:31.482210

Creates identities, users and jobs. Idempotent: tables that already exist
(e.g. created by init_db) are left alone.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c3e91a0b5d2'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('identities'):
        op.create_table('identities',
            sa.Column('uid', sa.String(length=28), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=True),
            sa.Column('display_name', sa.String(), nullable=True),
            sa.Column('photo_url', sa.String(), nullable=True),
            sa.Column('provider', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('uid')
        )
        op.create_index(op.f('ix_identities_uid'), 'identities', ['uid'], unique=False)
        op.create_index(op.f('ix_identities_email'), 'identities', ['email'], unique=True)

    if not table_exists('users'):
        op.create_table('users',
            sa.Column('uid', sa.String(length=28), nullable=False),
            sa.Column('username', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=True),
            sa.Column('is_admin', sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column('photo_url', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['uid'], ['identities.uid'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('uid')
        )
        op.create_index(op.f('ix_users_uid'), 'users', ['uid'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.String(length=20), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('salary', sa.Float(), nullable=False),
            sa.Column('job_type', sa.String(), nullable=False),
            sa.Column('keywords', sa.JSON(), nullable=False),
            sa.Column('posted_by', sa.String(length=28), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('applicants', sa.JSON(), nullable=False),
            sa.ForeignKeyConstraint(['posted_by'], ['users.uid'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_title'), 'jobs', ['title'], unique=False)
        op.create_index(op.f('ix_jobs_posted_by'), 'jobs', ['posted_by'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
        op.create_index('idx_jobs_poster_created', 'jobs', ['posted_by', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_jobs_poster_created', table_name='jobs')
    op.drop_index(op.f('ix_jobs_created_at'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_posted_by'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_title'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_id'), table_name='jobs')
    op.drop_table('jobs')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_uid'), table_name='users')
    op.drop_table('users')
    op.drop_index(op.f('ix_identities_email'), table_name='identities')
    op.drop_index(op.f('ix_identities_uid'), table_name='identities')
    op.drop_table('identities')

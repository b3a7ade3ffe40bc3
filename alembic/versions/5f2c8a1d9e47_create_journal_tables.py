"""Create users, entries and reflections tables

Revision ID: 5f2c8a1d9e47
Revises:
Create Date: 2026-10-19 10:12:44.218306

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5f2c8a1d9e47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.LargeBinary(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('email_confirmed', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('answer_1', sa.Text(), nullable=False, server_default=''),
        sa.Column('answer_2', sa.Text(), nullable=False, server_default=''),
        sa.Column('answer_3', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.UniqueConstraint('user_id', 'date', name='uq_entries_user_date'),
    )
    op.create_index('ix_entries_id', 'entries', ['id'])
    op.create_index('ix_entries_user_id', 'entries', ['user_id'])

    op.create_table(
        'reflections',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.UniqueConstraint('user_id', 'week_start', name='uq_reflections_user_week'),
    )
    op.create_index('ix_reflections_id', 'reflections', ['id'])
    op.create_index('ix_reflections_user_id', 'reflections', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_reflections_user_id', table_name='reflections')
    op.drop_index('ix_reflections_id', table_name='reflections')
    op.drop_table('reflections')
    op.drop_index('ix_entries_user_id', table_name='entries')
    op.drop_index('ix_entries_id', table_name='entries')
    op.drop_table('entries')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

"""create users

Revision ID: 0001_create_users
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_users'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role_enum = sa.Enum('admin', 'user', name='role')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('username', sa.String(length=15), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('role', role_enum, nullable=False, server_default='user'),
        sa.Column('avatar_url', sa.String(length=2048), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ux_users_username_lower', 'users', [sa.text('lower(username)')], unique=True
    )
    op.create_index(
        'ux_users_verified_email_lower',
        'users',
        [sa.text('lower(email)')],
        unique=True,
        postgresql_where=sa.text('is_email_verified'),
    )


def downgrade() -> None:
    op.drop_index('ux_users_verified_email_lower', table_name='users')
    op.drop_index('ux_users_username_lower', table_name='users')
    op.drop_table('users')
    role_enum.drop(op.get_bind(), checkfirst=True)

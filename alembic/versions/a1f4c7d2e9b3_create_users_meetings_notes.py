"""create users, meetings and notes tables

Revision ID: a1f4c7d2e9b3
Revises:
Create Date: 2026-10-19 09:00:00.000000

users is the Credential Store: one row per Google identity holding the
profile and the OAuth token pair. meetings holds extension captures and
notes holds user-authored notes. Neither references users with a foreign
key: the extension may post a meeting before its owner has ever signed in.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f4c7d2e9b3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users, meetings and notes tables."""
    op.create_table(
        'users',
        # Google's stable subject id
        sa.Column('google_id', sa.String(length=255), nullable=False),

        # Profile
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('picture', sa.Text(), nullable=True),

        # Token data
        sa.Column('access_token', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scopes', sa.JSON(), nullable=True),

        # Timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=False),

        sa.PrimaryKeyConstraint('google_id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)

    op.create_table(
        'meetings',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('user_google_id', sa.String(length=255), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('meeting_timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.Column('transcript', sa.Text(), nullable=False),
        sa.Column('chat_messages', sa.Text(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.Column('meeting_software', sa.String(length=100), nullable=False),
        sa.Column('raw_payload', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_meetings_user_google_id'),
        'meetings',
        ['user_google_id'],
        unique=False
    )

    op.create_table(
        'notes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_google_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_notes_user_google_id'),
        'notes',
        ['user_google_id'],
        unique=False
    )


def downgrade() -> None:
    """Drop the notes, meetings and users tables."""
    op.drop_index(op.f('ix_notes_user_google_id'), table_name='notes')
    op.drop_table('notes')
    op.drop_index(op.f('ix_meetings_user_google_id'), table_name='meetings')
    op.drop_table('meetings')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

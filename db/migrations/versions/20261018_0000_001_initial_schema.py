"""Initial schema with users, videos, video_tags, user_videos, playlists, notes, history and tags

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=True),  # Null for Google-only accounts
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(512), nullable=True),
        sa.Column('google_id', sa.String(255), nullable=True, unique=True),
        sa.Column('preferences', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_google_id', 'users', ['google_id'])

    # Videos table
    op.create_table(
        'videos',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('youtube_id', sa.String(32), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('thumbnail', sa.String(512), nullable=False),
        sa.Column('duration', sa.String(32), nullable=False),  # ISO-8601, e.g. PT4M13S
        sa.Column('published_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('channel_title', sa.String(255), nullable=False),
        sa.Column('view_count', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('like_count', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('added_by', sa.Uuid(), nullable=False),
        sa.Column('added_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['added_by'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_videos_youtube_id', 'videos', ['youtube_id'])
    op.create_index('ix_videos_added_by', 'videos', ['added_by'])
    op.create_index('ix_videos_added_at', 'videos', ['added_at'])
    op.create_index('idx_videos_owner_youtube_id', 'videos', ['added_by', 'youtube_id'], unique=True)

    # Video tags (ordered tag strings per video)
    op.create_table(
        'video_tags',
        sa.Column('video_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), primary_key=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_video_tags_name', 'video_tags', ['name'])

    # Per-user interaction overlay
    op.create_table(
        'user_videos',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('is_liked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_pinned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_in_watchlist', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('watch_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_watched_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('liked_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('pinned_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('added_to_watchlist_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_user_videos_video_id', 'user_videos', ['video_id'])
    op.create_index('idx_user_videos_user_video', 'user_videos', ['user_id', 'video_id'], unique=True)
    op.create_index('idx_user_videos_user_liked', 'user_videos', ['user_id', 'is_liked'])
    op.create_index('idx_user_videos_user_pinned', 'user_videos', ['user_id', 'is_pinned'])
    op.create_index('idx_user_videos_user_watchlist', 'user_videos', ['user_id', 'is_in_watchlist'])

    # Playlists table
    op.create_table(
        'playlists',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('video_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_playlists_owner_id', 'playlists', ['owner_id'])
    op.create_index('ix_playlists_updated_at', 'playlists', ['updated_at'])

    # Notes table
    op.create_table(
        'notes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.Integer(), nullable=True),  # Seconds into the video
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_notes_user_created', 'notes', ['user_id', 'created_at'])
    op.create_index('idx_notes_user_video', 'notes', ['user_id', 'video_id'])

    # History table
    op.create_table(
        'history',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('watched_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_history_user_watched', 'history', ['user_id', 'watched_at'])
    op.create_index('idx_history_video_watched', 'history', ['video_id', 'watched_at'])

    # Tag registry
    op.create_table(
        'tags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),  # Always lowercase
        sa.Column('color', sa.String(16), nullable=False, server_default='#3B82F6'),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_tags_owner_name', 'tags', ['owner_id', 'name'], unique=True)


def downgrade() -> None:
    op.drop_table('tags')
    op.drop_table('history')
    op.drop_table('notes')
    op.drop_table('playlists')
    op.drop_table('user_videos')
    op.drop_table('video_tags')
    op.drop_table('videos')
    op.drop_table('users')

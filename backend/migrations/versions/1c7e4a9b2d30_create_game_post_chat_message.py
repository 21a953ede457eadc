"""create game, post and chat_message tables

Revision ID: 1c7e4a9b2d30
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c7e4a9b2d30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('sport', sa.String(length=64), nullable=True),
        sa.Column('time', sa.String(length=64), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('players', sa.Integer(), nullable=False),
        sa.Column('max_players', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('players >= 0', name='ck_game_players_non_negative'),
        sa.CheckConstraint('players <= max_players', name='ck_game_players_within_max'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_game_created_at', 'game', ['created_at'], unique=False)

    op.create_table(
        'post',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('caption', sa.Text(), nullable=True),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('author_id', sa.String(length=64), nullable=True),
        sa.Column('author_name', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_post_created_at', 'post', ['created_at'], unique=False)

    op.create_table(
        'chat_message',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room', sa.String(length=128), nullable=False),
        sa.Column('author_id', sa.String(length=64), nullable=True),
        sa.Column('author_name', sa.String(length=128), nullable=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("room <> ''", name='ck_chat_message_room_not_empty'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_chat_message_room_created', 'chat_message', ['room', 'created_at', 'id'], unique=False)


def downgrade():
    op.drop_index('ix_chat_message_room_created', table_name='chat_message')
    op.drop_table('chat_message')
    op.drop_index('ix_post_created_at', table_name='post')
    op.drop_table('post')
    op.drop_index('ix_game_created_at', table_name='game')
    op.drop_table('game')

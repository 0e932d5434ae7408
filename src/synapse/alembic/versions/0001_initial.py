"""initial chat schema: users, thread, thread_unread, message

Revision ID: 0001_initial
Revises:
Create Date: 2025-11-03
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('user_image', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'thread',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('participant_low', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('participant_high', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('last_message', sa.Text(), nullable=False, server_default=''),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_message_sender_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('participant_low', 'participant_high', name='uq_thread_participants'),
        sa.CheckConstraint('participant_low <> participant_high', name='ck_thread_distinct_participants'),
    )
    op.create_index('ix_thread_participant_low', 'thread', ['participant_low'])
    op.create_index('ix_thread_participant_high', 'thread', ['participant_high'])
    op.create_index('ix_thread_last_message_at', 'thread', ['last_message_at'])

    op.create_table(
        'thread_unread',
        sa.Column('thread_id', sa.Uuid(as_uuid=True), sa.ForeignKey('thread.id', name='fk_thread_unread_thread_id_thread'), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', name='fk_thread_unread_user_id_users', ondelete='CASCADE'), primary_key=True),
        sa.Column('count', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_thread_unread_user_id', 'thread_unread', ['user_id'])

    op.create_table(
        'message',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('thread_id', sa.Uuid(as_uuid=True), sa.ForeignKey('thread.id', name='fk_message_thread_id_thread'), nullable=False),
        sa.Column('sender_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('receiver_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_message_thread_created', 'message', ['thread_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_message_thread_created', table_name='message')
    op.drop_table('message')
    op.drop_index('ix_thread_unread_user_id', table_name='thread_unread')
    op.drop_table('thread_unread')
    op.drop_index('ix_thread_last_message_at', table_name='thread')
    op.drop_index('ix_thread_participant_high', table_name='thread')
    op.drop_index('ix_thread_participant_low', table_name='thread')
    op.drop_table('thread')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

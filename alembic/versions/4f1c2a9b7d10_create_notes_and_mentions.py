"""Create notes and mentions tables

Revision ID: 4f1c2a9b7d10
Revises:
Create Date: 2025-09-20 10:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'notes',
        sa.Column('id', sa.String(length=6), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author_id', sa.String(length=64), nullable=False),
        sa.Column('channel_id', sa.String(length=64), nullable=True),
        sa.Column('parent_id', sa.String(length=6), nullable=True),
        sa.Column('depth', sa.Integer(), nullable=False),
        sa.Column('is_hidden', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('depth >= 0 AND depth <= 1', name='ck_notes_depth'),
        sa.CheckConstraint('length(content) <= 1000', name='ck_notes_content_len'),
        sa.ForeignKeyConstraint(['parent_id'], ['notes.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notes_parent_id', 'notes', ['parent_id'], unique=False)
    op.create_index('idx_notes_author_created', 'notes', ['author_id', 'created_at'], unique=False)
    op.create_index('idx_notes_channel', 'notes', ['channel_id'], unique=False)

    op.create_table(
        'mentions',
        sa.Column('id', sa.String(length=6), nullable=False),
        sa.Column('from_note_id', sa.String(length=6), nullable=False),
        sa.Column('to_note_id', sa.String(length=6), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['from_note_id'], ['notes.id']),
        sa.ForeignKeyConstraint(['to_note_id'], ['notes.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_mentions_from_note', 'mentions', ['from_note_id'], unique=False)
    op.create_index('idx_mentions_to_note', 'mentions', ['to_note_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_mentions_to_note', table_name='mentions')
    op.drop_index('idx_mentions_from_note', table_name='mentions')
    op.drop_table('mentions')
    op.drop_index('idx_notes_channel', table_name='notes')
    op.drop_index('idx_notes_author_created', table_name='notes')
    op.drop_index('idx_notes_parent_id', table_name='notes')
    op.drop_table('notes')

# Note model: short text posts arranged as root notes and replies
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..constants import MAX_DEPTH, MAX_NOTE_LENGTH, NOTE_ID_LENGTH, ROOT_DEPTH
from .base import BaseModel, utcnow
from .types import UTCDateTime


class Note(BaseModel):
    """Note with content, optional parent and hidden flag."""

    __tablename__ = "notes"

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    # channels are managed elsewhere, the note only keeps the reference
    channel_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # null means root note; deletion cleans replies up explicitly
    parent_id: Mapped[Optional[str]] = mapped_column(
        String(NOTE_ID_LENGTH), ForeignKey("notes.id"), nullable=True
    )
    depth: Mapped[int] = mapped_column(Integer, default=ROOT_DEPTH, nullable=False)
    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_notes_parent_id", "parent_id"),
        Index("idx_notes_author_created", "author_id", "created_at"),
        Index("idx_notes_channel", "channel_id"),
        CheckConstraint(f"depth >= {ROOT_DEPTH} AND depth <= {MAX_DEPTH}", name="ck_notes_depth"),
        CheckConstraint(f"length(content) <= {MAX_NOTE_LENGTH}", name="ck_notes_content_len"),
    )

    def __repr__(self) -> str:
        """
        Return a string representation of the Note instance.

        Returns:
            str: id, depth and truncated content
        """
        truncated = self.content if len(self.content) <= 30 else (self.content[:30] + "...")
        return f"<Note(id={self.id}, depth={self.depth}, content='{truncated}')>"

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

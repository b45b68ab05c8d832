# Mention model: directed @id references between notes
from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..constants import NOTE_ID_LENGTH
from .base import BaseModel


class Mention(BaseModel):
    """One `@id` token found in a note's content.

    A note mentioning the same id twice owns two rows with different positions.
    The set of all rows must form an acyclic graph over note ids.
    """

    __tablename__ = "mentions"

    from_note_id: Mapped[str] = mapped_column(
        String(NOTE_ID_LENGTH), ForeignKey("notes.id"), nullable=False
    )
    to_note_id: Mapped[str] = mapped_column(
        String(NOTE_ID_LENGTH), ForeignKey("notes.id"), nullable=False
    )
    # offset of the "@" character in the source note's content
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_mentions_from_note", "from_note_id"),
        Index("idx_mentions_to_note", "to_note_id"),
    )

    def __repr__(self) -> str:
        return f"<Mention({self.from_note_id} -> {self.to_note_id} @ {self.position})>"

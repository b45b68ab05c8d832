"""
Note schemas.

These schemas define the API contracts for note creation, update, listing,
threads and mentions. Content length and emptiness are not checked
here: the note service reports them as ContentEmptyError and
ContentTooLongError with both bounds.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import NOTE_ID_LENGTH
from .common import PaginationResponse

NOTE_ID_REGEX = rf"^[A-Za-z0-9]{{{NOTE_ID_LENGTH}}}$"


class NoteCreate(BaseModel):
    """Note creation request schema."""

    content: str = Field(description="Note content, may contain @id mentions")
    parent_id: Optional[str] = Field(
        default=None, pattern=NOTE_ID_REGEX, description="Note being replied to"
    )
    channel_id: Optional[str] = Field(
        default=None, max_length=64, description="Channel of a root note; replies inherit it"
    )
    # None means "not requested"; only root notes may ask for True
    is_hidden: Optional[bool] = Field(default=None, description="Hide a root note")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "content": "Follow-up on @aB3dE9 before Friday",
                "parent_id": None,
                "channel_id": "work",
                "is_hidden": False,
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request schema. Only content can change."""

    content: str = Field(description="New note content")

    model_config = ConfigDict(
        json_schema_extra={"example": {"content": "Updated text, see @aB3dE9"}}
    )


class NoteHiddenUpdate(BaseModel):
    """Hidden flag update for a root note."""

    is_hidden: bool = Field(description="New hidden status for the note and its replies")


class NoteResponse(BaseModel):
    """Note response schema."""

    id: str = Field(description="Note identifier")
    content: str = Field(description="Note content")
    author_id: str = Field(description="Author of the note")
    channel_id: Optional[str] = Field(default=None, description="Channel reference")
    parent_id: Optional[str] = Field(default=None, description="Parent note, null for roots")
    depth: int = Field(description="0 for root notes, 1 for replies")
    is_hidden: bool = Field(description="Whether the note is hidden")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "aB3dE9",
                "content": "Hello @Zx81Qp",
                "author_id": "user-1",
                "channel_id": "work",
                "parent_id": None,
                "depth": 0,
                "is_hidden": False,
                "created_at": "2025-09-13T10:30:00Z",
                "updated_at": "2025-09-13T11:00:00Z",
            }
        },
    )


class NoteListItem(NoteResponse):
    """Root note with its number of direct replies."""

    reply_count: int = Field(default=0, description="Number of direct replies")


class RootNoteListResponse(PaginationResponse[NoteListItem]):
    """Paginated root note list response."""


class NoteDetailResponse(BaseModel):
    """A note together with the thread it belongs to."""

    note: NoteResponse
    thread: List[NoteResponse] = Field(default_factory=list)


class MentionResponse(BaseModel):
    """Single mention row."""

    id: str
    from_note_id: str
    to_note_id: str
    position: int = Field(description="Offset of the @ character in the source note")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MentionWithNoteResponse(BaseModel):
    """A note mentioning the requested note, with the mention position."""

    note: NoteResponse
    position: int


class MentionListResponse(BaseModel):
    """Backlinks of a note."""

    mentions: List[MentionWithNoteResponse] = Field(default_factory=list)


class NoteDeletionResult(BaseModel):
    """What a cascade deletion removed."""

    deleted_note_ids: List[str]
    deleted_mention_count: int

"""
Service interfaces for ThreadNote.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..schemas.common import HealthCheckResponse
from ..schemas.notes import (
    MentionListResponse,
    MentionResponse,
    NoteCreate,
    NoteDeletionResult,
    NoteResponse,
    NoteUpdate,
    RootNoteListResponse,
)


class INoteService(ABC):
    """Note hierarchy manager: the single entry point for note writes."""

    @abstractmethod
    async def create_note(self, author_id: str, request: NoteCreate) -> NoteResponse:
        """Create a root note or a reply, with its mentions."""
        pass

    @abstractmethod
    async def get_note(self, note_id: str, author_id: str) -> NoteResponse:
        """Get an owned note by ID."""
        pass

    @abstractmethod
    async def update_note(self, note_id: str, author_id: str, request: NoteUpdate) -> NoteResponse:
        """Replace content and mentions of an owned note."""
        pass

    @abstractmethod
    async def update_hidden(self, note_id: str, author_id: str, is_hidden: bool) -> NoteResponse:
        """Hide or unhide a root note together with its replies."""
        pass

    @abstractmethod
    async def get_root_notes(
        self,
        author_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
        include_hidden: bool = False,
        channel_id: Optional[str] = None,
    ) -> RootNoteListResponse:
        """List root notes, newest first, with reply counts."""
        pass

    @abstractmethod
    async def delete_note(self, note_id: str, author_id: str) -> NoteDeletionResult:
        """Delete an owned note with its replies and mentions."""
        pass


class IThreadService(ABC):
    """Thread assembler."""

    @abstractmethod
    async def get_thread(self, note_id: str, author_id: Optional[str] = None) -> List[NoteResponse]:
        """Whole thread containing the note, root first."""
        pass

    @abstractmethod
    async def get_children(self, note_id: str, author_id: Optional[str] = None) -> List[NoteResponse]:
        """Direct replies of a note."""
        pass


class IMentionService(ABC):
    """Mention graph maintenance and lookups."""

    @abstractmethod
    async def validate_mentions(
        self, from_note_id: str, to_note_ids: Iterable[str], replace_existing: bool = False
    ) -> None:
        """Raise CircularReferenceError if the mentions would close a cycle."""
        pass

    @abstractmethod
    async def get_mentions(self, to_note_id: str, author_id: str) -> List[MentionResponse]:
        """Mention rows pointing at a note."""
        pass

    @abstractmethod
    async def get_mentions_with_notes(self, to_note_id: str, author_id: str) -> MentionListResponse:
        """Notes mentioning a note, with positions."""
        pass


class IDeletionService(ABC):
    """Cascade deletion."""

    @abstractmethod
    async def delete_note(self, note_id: str) -> NoteDeletionResult:
        """Remove a note, its replies and every mention touching them."""
        pass


class IHealthService(ABC):
    """Health monitoring."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

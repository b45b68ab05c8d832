"""Note service implementation."""

import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..constants import MAX_DEPTH, MAX_NOTE_LENGTH, ROOT_DEPTH
from ..errors import (
    ContentEmptyError,
    ContentTooLongError,
    DatabaseError,
    DepthLimitExceededError,
    InvalidHiddenReplyError,
    NoteNotFoundError,
    ParentNoteNotFoundError,
)
from ..ids import generate_id
from ..models.note import Note
from ..repositories.base import unit_of_work
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import (
    NoteCreate,
    NoteDeletionResult,
    NoteListItem,
    NoteResponse,
    NoteUpdate,
    RootNoteListResponse,
)
from .deletion_service import DeletionService
from .interfaces import INoteService
from .mention_parser import extract_mentions
from .mention_service import MentionService

logger = logging.getLogger("threadnote.services.notes")


def validate_content(content: str) -> None:
    """Raise ContentEmptyError or ContentTooLongError for unacceptable content.

    Emptiness is judged on the trimmed text, the length limit on the raw text.
    """
    if not content or not content.strip():
        raise ContentEmptyError()
    if len(content) > MAX_NOTE_LENGTH:
        raise ContentTooLongError(MAX_NOTE_LENGTH, len(content))


class NoteService(INoteService):
    """Note hierarchy manager.

    Every write validates first and then persists the note and its mention
    rows inside one unit of work, so a rejected request leaves storage as it
    was.
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.note_repo = NoteRepository(session)
        self.mention_service = MentionService(session)
        self.deletion_service = DeletionService(session)

    async def create_note(self, author_id: str, request: NoteCreate) -> NoteResponse:
        """Create a root note or a reply.

        Order: content checks, parent resolution, id allocation, cycle check
        and only then the writes.
        """
        async with unit_of_work(self.session):
            validate_content(request.content)
            depth, is_hidden, channel_id = await self._resolve_placement(author_id, request)

            note_id = await self._generate_note_id()
            targets = extract_mentions(request.content)
            await self.mention_service.validate_mentions(note_id, targets)

            note = await self.note_repo.create_note(
                {
                    "id": note_id,
                    "content": request.content,
                    "author_id": author_id,
                    "channel_id": channel_id,
                    "parent_id": request.parent_id,
                    "depth": depth,
                    "is_hidden": is_hidden,
                }
            )
            mentions = await self.mention_service.create_mentions_for_note(note.id, note.content)
            response = NoteResponse.model_validate(note)

        logger.info(
            f"Created note {note.id} (depth={depth}, parent={request.parent_id}) "
            f"with {len(mentions)} mention(s)",
            extra={"note_id": note.id, "author_id": author_id},
        )
        return response

    async def get_note(self, note_id: str, author_id: str) -> NoteResponse:
        note = await self._get_owned_note(note_id, author_id)
        return NoteResponse.model_validate(note)

    async def update_note(self, note_id: str, author_id: str, request: NoteUpdate) -> NoteResponse:
        """Replace content and mentions; hierarchy fields never change here."""
        async with unit_of_work(self.session):
            note = await self._get_owned_note(note_id, author_id)
            validate_content(request.content)

            targets = extract_mentions(request.content)
            await self.mention_service.validate_mentions(note.id, targets, replace_existing=True)

            note = await self.note_repo.update_content(note, request.content)
            mentions = await self.mention_service.replace_mentions(note.id, note.content)
            response = NoteResponse.model_validate(note)

        logger.info(
            f"Updated note {note_id} with {len(mentions)} mention(s)",
            extra={"note_id": note_id, "author_id": author_id},
        )
        return response

    async def update_hidden(self, note_id: str, author_id: str, is_hidden: bool) -> NoteResponse:
        """Set the hidden flag on a root note and copy it to all its replies."""
        async with unit_of_work(self.session):
            note = await self._get_owned_note(note_id, author_id)
            if not note.is_root:
                raise InvalidHiddenReplyError()

            replies = await self.note_repo.list_descendants(note.id)
            await self.note_repo.set_hidden([note.id, *(reply.id for reply in replies)], is_hidden)
            note = await self.note_repo.refresh(note)
            response = NoteResponse.model_validate(note)

        logger.info(f"Set hidden={is_hidden} on note {note_id} and {len(replies)} repl(ies)")
        return response

    async def get_root_notes(
        self,
        author_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
        include_hidden: bool = False,
        channel_id: Optional[str] = None,
    ) -> RootNoteListResponse:
        """List root notes with pagination and reply counts."""
        if limit is None:
            limit = self.settings.default_page_size
        limit = max(1, min(limit, self.settings.max_page_size))
        offset = max(0, offset)

        notes, total_count = await self.note_repo.list_root_notes(
            author_id,
            limit=limit,
            offset=offset,
            include_hidden=include_hidden,
            channel_id=channel_id,
        )
        reply_counts = await self.note_repo.count_replies(note.id for note in notes)

        items = [
            NoteListItem.model_validate(note).model_copy(
                update={"reply_count": reply_counts.get(note.id, 0)}
            )
            for note in notes
        ]
        return RootNoteListResponse.create(
            items=items, total=total_count, limit=limit, offset=offset
        )

    async def delete_note(self, note_id: str, author_id: str) -> NoteDeletionResult:
        """Delete an owned note through the cascade."""
        await self._get_owned_note(note_id, author_id)
        return await self.deletion_service.delete_note(note_id)

    async def _get_owned_note(self, note_id: str, author_id: str) -> Note:
        note = await self.note_repo.get_by_id_and_author(note_id, author_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    async def _resolve_placement(
        self, author_id: str, request: NoteCreate
    ) -> Tuple[int, bool, Optional[str]]:
        """Depth, hidden flag and channel for a new note.

        Replies take their parent's hidden flag and channel; an explicit
        is_hidden=True on a reply is rejected rather than overridden.
        """
        if request.parent_id is None:
            return ROOT_DEPTH, bool(request.is_hidden), request.channel_id

        parent = await self.note_repo.get_by_id_and_author(request.parent_id, author_id)
        if parent is None:
            raise ParentNoteNotFoundError(request.parent_id)
        if parent.depth >= MAX_DEPTH:
            raise DepthLimitExceededError(MAX_DEPTH)
        if request.is_hidden is True:
            raise InvalidHiddenReplyError()

        return parent.depth + 1, parent.is_hidden, parent.channel_id

    async def _generate_note_id(self) -> str:
        for _ in range(self.settings.id_generation_attempts):
            candidate = generate_id()
            if not await self.note_repo.exists(candidate):
                return candidate
        raise DatabaseError(
            f"Could not allocate a unique note id after {self.settings.id_generation_attempts} attempts"
        )

"""Cascade deletion of notes, their replies and mentions."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NoteNotFoundError
from ..repositories.base import unit_of_work
from ..repositories.mention_repository import MentionRepository
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteDeletionResult
from .interfaces import IDeletionService

logger = logging.getLogger("threadnote.services.deletion")


class DeletionService(IDeletionService):
    """Application-level cascade.

    Does not rely on ON DELETE CASCADE: mention rows touching a note are
    removed before the note itself, replies before their parent, all inside
    one transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.mention_repo = MentionRepository(session)

    async def delete_note(self, note_id: str) -> NoteDeletionResult:
        async with unit_of_work(self.session):
            note = await self.note_repo.get_by_id(note_id)
            if note is None:
                raise NoteNotFoundError(note_id)

            # only direct replies while MAX_DEPTH is 1
            replies = await self.note_repo.list_descendants(note_id)
            deleted_ids = [note_id, *(reply.id for reply in replies)]

            mention_count = await self.mention_repo.delete_by_note_id(note_id)
            # deepest replies first so no row still points at a deleted parent
            for reply in sorted(replies, key=lambda n: n.depth, reverse=True):
                mention_count += await self.mention_repo.delete_by_note_id(reply.id)
                await self.note_repo.delete_note(reply.id)

            await self.note_repo.delete_note(note_id)

        logger.info(
            f"Deleted note {note_id} with {len(replies)} repl(ies) and {mention_count} mention(s)",
            extra={"note_id": note_id},
        )
        return NoteDeletionResult(deleted_note_ids=deleted_ids, deleted_mention_count=mention_count)

"""Mention service implementation."""

import logging
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import CircularReferenceError, NoteNotFoundError
from ..ids import generate_id
from ..models.mention import Mention
from ..repositories.mention_repository import MentionRepository
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import (
    MentionListResponse,
    MentionResponse,
    MentionWithNoteResponse,
    NoteResponse,
)
from .interfaces import IMentionService
from .mention_graph import detect_circular_reference, find_cycle_targets
from .mention_parser import get_mention_positions

logger = logging.getLogger("threadnote.services.mentions")


class MentionService(IMentionService):
    """Mention service implementation.

    Writes here only flush; the calling note operation owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mention_repo = MentionRepository(session)
        self.note_repo = NoteRepository(session)

    async def validate_mentions(
        self, from_note_id: str, to_note_ids: Iterable[str], replace_existing: bool = False
    ) -> None:
        """Check the proposed mentions against the stored graph.

        With replace_existing the note's current outgoing mentions are left out
        of the graph first (update semantics: remove, then propose).
        """
        proposed = list(to_note_ids)
        if not proposed:
            return

        graph = await self.mention_repo.get_mention_graph()
        if detect_circular_reference(from_note_id, proposed, graph, replace_existing):
            offending = find_cycle_targets(from_note_id, proposed, graph, replace_existing)
            logger.warning(
                f"Rejected mentions from {from_note_id}: cycle through {offending or proposed}"
            )
            raise CircularReferenceError(from_note_id, offending or proposed)

    async def create_mentions_for_note(self, note_id: str, content: str) -> List[Mention]:
        """One row per mention occurrence whose target is a stored note."""
        positions = get_mention_positions(content)
        if not positions:
            return []

        known = await self.note_repo.existing_ids(target for target, _ in positions)
        now = datetime.now(timezone.utc)
        rows = [
            {
                "id": generate_id(),
                "from_note_id": note_id,
                "to_note_id": target,
                "position": position,
                "created_at": now,
            }
            for target, position in positions
            if target in known
        ]
        skipped = len(positions) - len(rows)
        if skipped:
            logger.debug(f"Note {note_id}: {skipped} mention(s) of unknown notes not stored")
        return await self.mention_repo.create_mentions(rows)

    async def replace_mentions(self, note_id: str, content: str) -> List[Mention]:
        """Drop the note's outgoing mentions and store the ones in content."""
        removed = await self.mention_repo.delete_outgoing(note_id)
        created = await self.create_mentions_for_note(note_id, content)
        logger.debug(f"Note {note_id}: replaced {removed} mention(s) with {len(created)}")
        return created

    async def get_mentions(self, to_note_id: str, author_id: str) -> List[MentionResponse]:
        """Mention rows pointing at a note, from the author's notes."""
        mentions = await self.mention_repo.list_by_to_note(to_note_id, author_id)
        return [MentionResponse.model_validate(mention) for mention in mentions]

    async def get_mentions_with_notes(self, to_note_id: str, author_id: str) -> MentionListResponse:
        """Backlinks of an owned note: the mentioning notes and positions."""
        target = await self.note_repo.get_by_id_and_author(to_note_id, author_id)
        if target is None:
            raise NoteNotFoundError(to_note_id)

        pairs = await self.mention_repo.list_with_source_notes(to_note_id, author_id)
        return MentionListResponse(
            mentions=[
                MentionWithNoteResponse(
                    note=NoteResponse.model_validate(note), position=mention.position
                )
                for mention, note in pairs
            ]
        )

"""Thread assembly: a root note and its replies in display order."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NoteNotFoundError
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteResponse
from .interfaces import IThreadService

logger = logging.getLogger("threadnote.services.threads")


class ThreadService(IThreadService):
    """Thread assembler.

    Walks up to the root and then breadth-first down the reply edges. Neither
    walk assumes the two-level limit, so both stay correct if MAX_DEPTH grows.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)

    async def get_thread(self, note_id: str, author_id: Optional[str] = None) -> List[NoteResponse]:
        """All notes of the thread containing note_id, root first.

        Ordered by (depth, created_at, id), so every note of a thread yields
        the same list. Notes stamped in the same clock tick fall back to id
        order, which is stable but not necessarily creation order.
        """
        note = await self._load(note_id, author_id)
        root = await self._find_root(note, author_id)

        collected: List[Note] = [root]
        seen = {root.id}
        frontier = [root.id]
        while frontier:
            children = [
                child
                for child in await self.note_repo.list_children_of_many(frontier, author_id)
                if child.id not in seen
            ]
            seen.update(child.id for child in children)
            collected.extend(children)
            frontier = [child.id for child in children]

        collected.sort(key=lambda n: (n.depth, n.created_at, n.id))
        logger.debug(f"Assembled thread of {len(collected)} note(s) for {note_id} (root {root.id})")
        return [NoteResponse.model_validate(n) for n in collected]

    async def get_children(self, note_id: str, author_id: Optional[str] = None) -> List[NoteResponse]:
        """Direct replies only, oldest first."""
        await self._load(note_id, author_id)
        children = await self.note_repo.list_children(note_id, author_id)
        return [NoteResponse.model_validate(child) for child in children]

    async def _load(self, note_id: str, author_id: Optional[str]) -> Note:
        if author_id is None:
            note = await self.note_repo.get_by_id(note_id)
        else:
            note = await self.note_repo.get_by_id_and_author(note_id, author_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    async def _find_root(self, note: Note, author_id: Optional[str]) -> Note:
        # stops at a missing parent or a loop instead of failing
        visited = {note.id}
        current = note
        while current.parent_id is not None and current.parent_id not in visited:
            parent = await self.note_repo.get_by_id(current.parent_id)
            if parent is None or (author_id is not None and parent.author_id != author_id):
                break
            visited.add(parent.id)
            current = parent
        return current

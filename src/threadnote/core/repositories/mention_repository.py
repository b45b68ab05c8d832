"""Mention repository for database operations."""

from typing import Dict, Iterable, List, Tuple

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.mention import Mention
from ..models.note import Note
from .base import db_call


def build_graph_from_rows(rows: Iterable[Tuple[str, str]]) -> Dict[str, List[str]]:
    """Adjacency mapping from (from_note_id, to_note_id) pairs."""
    graph: Dict[str, List[str]] = {}
    for from_note_id, to_note_id in rows:
        graph.setdefault(from_note_id, []).append(to_note_id)
    return graph


class MentionRepository:
    """Repository for mention database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_mentions(self, mentions: List[Dict]) -> List[Mention]:
        """Insert mention rows; no-op for an empty list."""
        if not mentions:
            return []
        rows = [Mention(**data) for data in mentions]
        async with db_call("Failed to create mention"):
            self.session.add_all(rows)
            await self.session.flush()
        return rows

    async def delete_by_note_id(self, note_id: str) -> int:
        """Delete every mention where the note is either endpoint."""
        stmt = (
            delete(Mention)
            .where(or_(Mention.from_note_id == note_id, Mention.to_note_id == note_id))
            .execution_options(synchronize_session="fetch")
        )
        async with db_call("Failed to delete mentions"):
            result = await self.session.execute(stmt)
            return result.rowcount or 0

    async def delete_outgoing(self, from_note_id: str) -> int:
        """Delete the mentions written in a note's content."""
        stmt = (
            delete(Mention)
            .where(Mention.from_note_id == from_note_id)
            .execution_options(synchronize_session="fetch")
        )
        async with db_call("Failed to delete mentions"):
            result = await self.session.execute(stmt)
            return result.rowcount or 0

    async def get_mention_graph(self) -> Dict[str, List[str]]:
        """Full scan of all mentions as an adjacency mapping."""
        stmt = select(Mention.from_note_id, Mention.to_note_id)
        async with db_call("Failed to get mentions"):
            result = await self.session.execute(stmt)
            rows = result.all()
        return build_graph_from_rows(rows)

    async def list_by_from_note(self, from_note_id: str) -> List[Mention]:
        stmt = (
            select(Mention)
            .where(Mention.from_note_id == from_note_id)
            .order_by(Mention.position)
        )
        async with db_call("Failed to find mentions by from note id"):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def list_by_to_note(self, to_note_id: str, author_id: str) -> List[Mention]:
        """Mentions of a note written in notes owned by the author."""
        stmt = (
            select(Mention)
            .join(Note, Note.id == Mention.from_note_id)
            .where(Mention.to_note_id == to_note_id, Note.author_id == author_id)
            .order_by(Mention.created_at, Mention.position)
        )
        async with db_call("Failed to find mentions by to note id"):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def list_with_source_notes(
        self, to_note_id: str, author_id: str
    ) -> List[Tuple[Mention, Note]]:
        """Mentions of a note together with the note that contains them."""
        stmt = (
            select(Mention, Note)
            .join(Note, Note.id == Mention.from_note_id)
            .where(Mention.to_note_id == to_note_id, Note.author_id == author_id)
            .order_by(Mention.created_at, Mention.position)
        )
        async with db_call("Failed to get mentions with notes"):
            result = await self.session.execute(stmt)
            return [(mention, note) for mention, note in result.all()]

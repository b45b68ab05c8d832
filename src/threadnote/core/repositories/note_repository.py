"""Note repository for database operations."""

from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import and_, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note
from .base import db_call


class NoteRepository:
    """Repository for note database operations.

    Lookups return None (or empty collections) for missing rows; only storage
    failures raise, as DatabaseError. Writes flush but never commit.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: Dict[str, Any]) -> Note:
        """Insert a new note."""
        note = Note(**note_data)
        async with db_call("Failed to create note"):
            self.session.add(note)
            await self.session.flush()
        return note

    async def get_by_id(self, note_id: str) -> Optional[Note]:
        """Get note by ID."""
        stmt = select(Note).where(Note.id == note_id)
        async with db_call("Failed to find note"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_by_id_and_author(self, note_id: str, author_id: str) -> Optional[Note]:
        """Get note by ID if owned by author."""
        stmt = select(Note).where(and_(Note.id == note_id, Note.author_id == author_id))
        async with db_call("Failed to find note"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def exists(self, note_id: str) -> bool:
        stmt = select(Note.id).where(Note.id == note_id)
        async with db_call("Failed to check note id"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def existing_ids(self, note_ids: Iterable[str]) -> Set[str]:
        """Subset of the given ids that are stored notes."""
        ids = set(note_ids)
        if not ids:
            return set()
        stmt = select(Note.id).where(Note.id.in_(ids))
        async with db_call("Failed to look up note ids"):
            result = await self.session.execute(stmt)
            return set(result.scalars())

    async def list_children(self, parent_id: str, author_id: Optional[str] = None) -> List[Note]:
        """Direct replies of a note, oldest first."""
        stmt = select(Note).where(Note.parent_id == parent_id)
        if author_id is not None:
            stmt = stmt.where(Note.author_id == author_id)
        stmt = stmt.order_by(Note.created_at, Note.id)
        async with db_call("Failed to find notes by parent id"):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def list_children_of_many(
        self, parent_ids: Iterable[str], author_id: Optional[str] = None
    ) -> List[Note]:
        """Direct replies of any of the given notes, oldest first."""
        ids = list(parent_ids)
        if not ids:
            return []
        stmt = select(Note).where(Note.parent_id.in_(ids))
        if author_id is not None:
            stmt = stmt.where(Note.author_id == author_id)
        stmt = stmt.order_by(Note.created_at, Note.id)
        async with db_call("Failed to find notes by parent ids"):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def list_descendants(self, note_id: str) -> List[Note]:
        """All replies below a note, level by level (shallowest first)."""
        descendants: List[Note] = []
        seen = {note_id}
        frontier = [note_id]
        while frontier:
            children = [
                child
                for child in await self.list_children_of_many(frontier)
                if child.id not in seen
            ]
            seen.update(child.id for child in children)
            descendants.extend(children)
            frontier = [child.id for child in children]
        return descendants

    async def list_root_notes(
        self,
        author_id: str,
        limit: int = 20,
        offset: int = 0,
        include_hidden: bool = False,
        channel_id: Optional[str] = None,
    ) -> tuple[List[Note], int]:
        """Root notes of an author, newest first, with the unpaginated total."""
        conditions = [Note.author_id == author_id, Note.parent_id.is_(None)]
        if not include_hidden:
            conditions.append(Note.is_hidden.is_(False))
        if channel_id is not None:
            conditions.append(Note.channel_id == channel_id)

        count_stmt = select(func.count(Note.id)).where(*conditions)
        stmt = (
            select(Note)
            .where(*conditions)
            .order_by(desc(Note.created_at), desc(Note.id))
            .offset(offset)
            .limit(limit)
        )

        async with db_call("Failed to find root notes"):
            total_result = await self.session.execute(count_stmt)
            total_count = total_result.scalar() or 0

            result = await self.session.execute(stmt)
            notes = result.scalars().all()

        return list(notes), total_count

    async def count_replies(self, note_ids: Iterable[str]) -> Dict[str, int]:
        """Number of direct replies per note id (0 for notes without replies)."""
        ids = list(note_ids)
        if not ids:
            return {}
        stmt = (
            select(Note.parent_id, func.count(Note.id))
            .where(Note.parent_id.in_(ids))
            .group_by(Note.parent_id)
        )
        async with db_call("Failed to count replies"):
            result = await self.session.execute(stmt)
            counts = {parent_id: count for parent_id, count in result.all()}
        return {note_id: counts.get(note_id, 0) for note_id in ids}

    async def update_content(self, note: Note, content: str) -> Note:
        """Replace the content of a note; updated_at is bumped by the model."""
        async with db_call("Failed to update note"):
            note.content = content
            await self.session.flush()
            await self.session.refresh(note)
        return note

    async def refresh(self, note: Note) -> Note:
        """Reload a note after bulk statements touched its row."""
        async with db_call("Failed to reload note"):
            await self.session.refresh(note)
        return note

    async def set_hidden(self, note_ids: Iterable[str], is_hidden: bool) -> int:
        """Set the hidden flag on several notes at once."""
        ids = list(note_ids)
        if not ids:
            return 0
        stmt = (
            update(Note)
            .where(Note.id.in_(ids))
            .values(is_hidden=is_hidden)
            .execution_options(synchronize_session="fetch")
        )
        async with db_call("Failed to update hidden flag"):
            result = await self.session.execute(stmt)
            return result.rowcount or 0

    async def delete_note(self, note_id: str) -> bool:
        """Delete a single note row. Mentions and replies must be gone already."""
        stmt = delete(Note).where(Note.id == note_id).execution_options(synchronize_session="fetch")
        async with db_call("Failed to delete note"):
            result = await self.session.execute(stmt)
            return (result.rowcount or 0) > 0

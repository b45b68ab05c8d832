"""Notes API endpoints."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.notes import (
    NOTE_ID_REGEX,
    MentionListResponse,
    NoteCreate,
    NoteDetailResponse,
    NoteHiddenUpdate,
    NoteResponse,
    NoteUpdate,
    RootNoteListResponse,
)
from ..core.services import MentionService, NoteService, ThreadService
from ..database import get_db_session
from ..middleware.auth import get_current_author_id

router = APIRouter(prefix="/notes", tags=["notes"])

NoteId = Annotated[str, Path(pattern=NOTE_ID_REGEX, description="Six character note id")]


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a root note or a reply."""
    note_service = NoteService(session)
    return await note_service.create_note(author_id, request)


@router.get("/", response_model=RootNoteListResponse)
async def list_root_notes(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    include_hidden: bool = Query(False),
    channel_id: Optional[str] = Query(None, max_length=64),
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List the author's root notes, newest first."""
    note_service = NoteService(session)
    return await note_service.get_root_notes(
        author_id,
        limit=limit,
        offset=offset,
        include_hidden=include_hidden,
        channel_id=channel_id,
    )


@router.get("/{note_id}", response_model=NoteDetailResponse)
async def get_note(
    note_id: NoteId,
    include_thread: bool = Query(True),
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a note, with its whole thread unless include_thread is false."""
    note = await NoteService(session).get_note(note_id, author_id)
    thread: List[NoteResponse] = []
    if include_thread:
        thread = await ThreadService(session).get_thread(note_id, author_id)
    return NoteDetailResponse(note=note, thread=thread)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    request: NoteUpdate,
    note_id: NoteId,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Replace the content of a note."""
    note_service = NoteService(session)
    return await note_service.update_note(note_id, author_id, request)


@router.patch("/{note_id}/hidden", response_model=NoteResponse)
async def update_hidden(
    request: NoteHiddenUpdate,
    note_id: NoteId,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Hide or unhide a root note and its replies."""
    note_service = NoteService(session)
    return await note_service.update_hidden(note_id, author_id, request.is_hidden)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: NoteId,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note together with its replies and mentions."""
    note_service = NoteService(session)
    await note_service.delete_note(note_id, author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{note_id}/thread", response_model=List[NoteResponse])
async def get_thread(
    note_id: NoteId,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Whole thread containing the note, root first."""
    thread_service = ThreadService(session)
    return await thread_service.get_thread(note_id, author_id)


@router.get("/{note_id}/children", response_model=List[NoteResponse])
async def get_children(
    note_id: NoteId,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Direct replies of a note."""
    thread_service = ThreadService(session)
    return await thread_service.get_children(note_id, author_id)


@router.get("/{note_id}/mentions", response_model=MentionListResponse)
async def get_mentions(
    note_id: NoteId,
    author_id: str = Depends(get_current_author_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes that mention this note."""
    mention_service = MentionService(session)
    return await mention_service.get_mentions_with_notes(note_id, author_id)

"""
Pydantic schemas for validating and documenting API requests and responses.

This package exposes the Pydantic models used across the application to
define input/output contracts for notes, threads, mentions and common
responses (pagination, errors and health checks).
"""

from .common import ErrorResponse, HealthCheckResponse, PaginationResponse
from .notes import (
    MentionListResponse,
    MentionResponse,
    MentionWithNoteResponse,
    NoteCreate,
    NoteDeletionResult,
    NoteDetailResponse,
    NoteHiddenUpdate,
    NoteListItem,
    NoteResponse,
    NoteUpdate,
    RootNoteListResponse,
)

__all__ = [
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteHiddenUpdate",
    "NoteResponse",
    "NoteListItem",
    "RootNoteListResponse",
    "NoteDetailResponse",
    "NoteDeletionResult",
    # Mention schemas
    "MentionResponse",
    "MentionWithNoteResponse",
    "MentionListResponse",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]

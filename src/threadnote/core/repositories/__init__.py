"""Repository layer for data access."""

from .base import db_call, unit_of_work
from .mention_repository import MentionRepository
from .note_repository import NoteRepository

__all__ = [
    "NoteRepository",
    "MentionRepository",
    "db_call",
    "unit_of_work",
]

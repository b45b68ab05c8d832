"""
Database models for ThreadNote.

This package contains SQLAlchemy ORM models that define the database schema
for notes and the mentions between them. All models are designed for async
operations through the repository layer.

Models included:
    - Note: root notes and replies with depth and hidden flag
    - Mention: @id references from one note to another, with position
"""

from .base import BaseModel
from .mention import Mention
from .note import Note

__all__ = [
    "BaseModel",
    "Note",
    "Mention",
]

"""
Service layer interfaces and implementations.

Services own the transactions: repositories only flush, and each note
operation commits or rolls back as a whole.
"""

from .interfaces import (
    IDeletionService,
    IHealthService,
    IMentionService,
    INoteService,
    IThreadService,
)

from .deletion_service import DeletionService
from .health_service import HealthService
from .mention_service import MentionService
from .note_service import NoteService
from .thread_service import ThreadService

__all__ = [
    # Interfaces
    "INoteService",
    "IThreadService",
    "IMentionService",
    "IDeletionService",
    "IHealthService",

    # Implementations
    "NoteService",
    "ThreadService",
    "MentionService",
    "DeletionService",
    "HealthService",
]

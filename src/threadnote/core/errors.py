"""
Domain errors for the note hierarchy and mention graph.

Every expected failure of a note operation is one of these classes, so callers
can branch on the concrete type (or on ``code``) to pick a response. Storage
failures are wrapped into ``DatabaseError`` with the driver exception kept as
``__cause__``.
"""

from typing import Any, Dict, Iterable, List, Optional

from fastapi import status


class NoteError(Exception):
    """Base class for all note domain errors."""

    code: str = "NoteError"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        """Structured payload for API responses."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details()}


# Validation errors (400)


class ContentEmptyError(NoteError):
    code = "ContentEmptyError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self):
        super().__init__("Note content cannot be empty")


class ContentTooLongError(NoteError):
    code = "ContentTooLongError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, max_length: int, actual_length: int):
        super().__init__(
            f"Note content must be at most {max_length} characters (got {actual_length})"
        )
        self.max_length = max_length
        self.actual_length = actual_length

    def details(self) -> Dict[str, Any]:
        return {"max_length": self.max_length, "actual_length": self.actual_length}


class DepthLimitExceededError(NoteError):
    code = "DepthLimitExceededError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, max_depth: int):
        super().__init__(
            f"Cannot create child for a note that is already at maximum depth ({max_depth})"
        )
        self.max_depth = max_depth

    def details(self) -> Dict[str, Any]:
        return {"max_depth": self.max_depth}


class CircularReferenceError(NoteError):
    code = "CircularReferenceError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, from_note_id: str, to_note_ids: Iterable[str]):
        super().__init__("Circular reference detected in mentions")
        self.from_note_id = from_note_id
        self.to_note_ids: List[str] = list(to_note_ids)

    def details(self) -> Dict[str, Any]:
        return {"from_note_id": self.from_note_id, "to_note_ids": self.to_note_ids}


class InvalidHiddenReplyError(NoteError):
    code = "InvalidHiddenReplyError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self):
        super().__init__("Replies cannot be hidden explicitly; they inherit their parent's status")


# Not found errors (404)


class NoteNotFoundError(NoteError):
    code = "NoteNotFoundError"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, note_id: str):
        super().__init__(f"Note with id '{note_id}' not found")
        self.note_id = note_id

    def details(self) -> Dict[str, Any]:
        return {"note_id": self.note_id}


class ParentNoteNotFoundError(NoteError):
    code = "ParentNoteNotFoundError"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, parent_id: str):
        super().__init__(f"Parent note with id '{parent_id}' not found")
        self.parent_id = parent_id

    def details(self) -> Dict[str, Any]:
        return {"parent_id": self.parent_id}


# Storage errors (500)


class DatabaseError(NoteError):
    code = "DatabaseError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error


def is_client_error(error: NoteError) -> bool:
    """True for errors caused by the request rather than the server."""
    return 400 <= error.status_code < 500


__all__ = [
    "NoteError",
    "ContentEmptyError",
    "ContentTooLongError",
    "DepthLimitExceededError",
    "CircularReferenceError",
    "InvalidHiddenReplyError",
    "NoteNotFoundError",
    "ParentNoteNotFoundError",
    "DatabaseError",
    "is_client_error",
]

# Base model for database stuff
from datetime import datetime, timezone

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..constants import NOTE_ID_LENGTH
from ..ids import generate_id
from .types import UTCDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(DeclarativeBase):
    """Common base for all models."""

    __abstract__ = True

    # short alphanumeric ids everywhere
    id: Mapped[str] = mapped_column(
        String(NOTE_ID_LENGTH),
        primary_key=True,
        default=generate_id,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

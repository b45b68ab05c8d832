"""Shared helpers for repositories: error wrapping and transactions."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import DatabaseError

logger = logging.getLogger("threadnote.repositories")


@asynccontextmanager
async def db_call(message: str) -> AsyncIterator[None]:
    """Wrap driver/ORM failures of a single storage call into DatabaseError.

    Usage:
        async with db_call("Failed to find note"):
            result = await self.session.execute(stmt)
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"{message}: {exc}")
        raise DatabaseError(message, exc) from exc


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit once on success, roll back on any failure.

    Repositories only flush; the service that owns the operation decides when
    the note and mention rows become visible together.
    """
    try:
        yield session
        async with db_call("Failed to commit transaction"):
            await session.commit()
    except Exception:
        async with db_call("Failed to roll back transaction"):
            await session.rollback()
        raise

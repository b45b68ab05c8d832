"""Shared pytest fixtures configured to use SQLite in-memory for unit tests."""

import logging
import os

# Tell app lifespan to skip real DB init; must be set before the app starts
os.environ.setdefault("THREADNOTE_SKIP_LIFESPAN_DB", "1")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from threadnote.config import Settings, get_settings
from threadnote.core.models import BaseModel, Mention
from threadnote.core.schemas.notes import NoteCreate
from threadnote.core.services import MentionService, NoteService, ThreadService
from threadnote.database import get_db_session
from threadnote.main import app
from threadnote.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

AUTHOR_ID = "author-1"
OTHER_AUTHOR_ID = "author-2"


@pytest.fixture(scope="session")
def test_settings():
    """Override settings for testing using SQLite in-memory DB."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret-key",
        debug=True,
    )


@pytest.fixture
async def test_engine(test_settings):
    """Fresh SQLite in-memory engine with the schema created, per test."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite enforces foreign keys only when asked to
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Session per test; expire_on_commit off like the app's session factory."""
    async_session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def note_service(test_session):
    return NoteService(test_session)


@pytest.fixture
def thread_service(test_session):
    return ThreadService(test_session)


@pytest.fixture
def mention_service(test_session):
    return MentionService(test_session)


@pytest.fixture
def create_note(note_service):
    """Shortcut: create a note for AUTHOR_ID (or another author)."""

    async def _create(content="Hello", parent_id=None, author_id=AUTHOR_ID, **kwargs):
        request = NoteCreate(content=content, parent_id=parent_id, **kwargs)
        return await note_service.create_note(author_id, request)

    return _create


@pytest.fixture
def count_rows(test_session):
    """Count rows of a model, optionally filtered."""

    async def _count(model, *conditions):
        stmt = select(func.count()).select_from(model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await test_session.execute(stmt)
        return result.scalar_one()

    return _count


@pytest.fixture
def mention_rows(test_session):
    """All stored mention rows as (from, to, position) tuples."""

    async def _rows():
        result = await test_session.execute(
            select(Mention.from_note_id, Mention.to_note_id, Mention.position).order_by(
                Mention.position
            )
        )
        return [tuple(row) for row in result.all()]

    return _rows


@pytest.fixture
def override_get_db(test_session):
    """Override the get_db dependency."""

    async def _override_get_db():
        yield test_session

    return _override_get_db


@pytest.fixture
def test_app(override_get_db, test_settings):
    """FastAPI app with overridden dependencies."""
    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """Async test client running in the test's event loop."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Authentication headers with a valid JWT for AUTHOR_ID."""
    access_token = create_access_token({"sub": AUTHOR_ID})
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def other_auth_headers():
    access_token = create_access_token({"sub": OTHER_AUTHOR_ID})
    return {"Authorization": f"Bearer {access_token}"}


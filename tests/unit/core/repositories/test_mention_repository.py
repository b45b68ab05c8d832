"""MentionRepository tests against SQLite in-memory."""

from datetime import datetime, timedelta, timezone

import pytest

from threadnote.core.repositories import MentionRepository, NoteRepository
from threadnote.core.repositories.mention_repository import build_graph_from_rows

BASE_TIME = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


def test_build_graph_from_rows():
    rows = [("A", "B"), ("A", "C"), ("B", "C")]
    assert build_graph_from_rows(rows) == {"A": ["B", "C"], "B": ["C"]}
    assert build_graph_from_rows([]) == {}


@pytest.fixture
async def notes(test_session):
    repo = NoteRepository(test_session)
    for i, (note_id, author) in enumerate(
        [("NoteA1", "author-1"), ("NoteB1", "author-1"), ("NoteC1", "author-2")]
    ):
        await repo.create_note(
            {
                "id": note_id,
                "content": note_id,
                "author_id": author,
                "depth": 0,
                "created_at": BASE_TIME + timedelta(minutes=i),
            }
        )


@pytest.fixture
async def repo(test_session, notes):
    repo = MentionRepository(test_session)
    await repo.create_mentions(
        [
            {"id": "Men001", "from_note_id": "NoteA1", "to_note_id": "NoteB1", "position": 3,
             "created_at": BASE_TIME},
            {"id": "Men002", "from_note_id": "NoteA1", "to_note_id": "NoteB1", "position": 0,
             "created_at": BASE_TIME},
            {"id": "Men003", "from_note_id": "NoteC1", "to_note_id": "NoteB1", "position": 1,
             "created_at": BASE_TIME + timedelta(seconds=1)},
            {"id": "Men004", "from_note_id": "NoteB1", "to_note_id": "NoteC1", "position": 2,
             "created_at": BASE_TIME + timedelta(seconds=2)},
        ]
    )
    return repo


class TestMentionRepository:
    async def test_create_empty_is_noop(self, test_session):
        assert await MentionRepository(test_session).create_mentions([]) == []

    async def test_graph_full_scan(self, repo):
        graph = await repo.get_mention_graph()
        assert sorted(graph["NoteA1"]) == ["NoteB1", "NoteB1"]
        assert graph["NoteC1"] == ["NoteB1"]
        assert graph["NoteB1"] == ["NoteC1"]

    async def test_list_by_from_note_ordered_by_position(self, repo):
        rows = await repo.list_by_from_note("NoteA1")
        assert [r.position for r in rows] == [0, 3]

    async def test_list_by_to_note_filters_source_author(self, repo):
        rows = await repo.list_by_to_note("NoteB1", "author-1")
        assert [r.id for r in rows] == ["Men002", "Men001"]
        rows = await repo.list_by_to_note("NoteB1", "author-2")
        assert [r.id for r in rows] == ["Men003"]

    async def test_list_with_source_notes(self, repo):
        pairs = await repo.list_with_source_notes("NoteB1", "author-1")
        assert [(m.position, n.id) for m, n in pairs] == [(0, "NoteA1"), (3, "NoteA1")]

    async def test_delete_outgoing_keeps_incoming(self, repo):
        assert await repo.delete_outgoing("NoteB1") == 1
        graph = await repo.get_mention_graph()
        assert "NoteB1" not in graph
        assert graph["NoteC1"] == ["NoteB1"]

    async def test_delete_by_note_id_removes_both_directions(self, repo):
        assert await repo.delete_by_note_id("NoteB1") == 4
        assert await repo.get_mention_graph() == {}

"""NoteRepository tests against SQLite in-memory."""

from datetime import datetime, timedelta, timezone

import pytest

from threadnote.core.repositories import NoteRepository

AUTHOR = "author-1"
BASE_TIME = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo(test_session):
    return NoteRepository(test_session)


@pytest.fixture
def add_note(repo):
    counter = {"n": 0}

    async def _add(note_id, parent_id=None, author_id=AUTHOR, **fields):
        counter["n"] += 1
        data = {
            "id": note_id,
            "content": fields.pop("content", f"note {note_id}"),
            "author_id": author_id,
            "parent_id": parent_id,
            "depth": 0 if parent_id is None else 1,
            "created_at": BASE_TIME + timedelta(minutes=counter["n"]),
        }
        data.update(fields)
        return await repo.create_note(data)

    return _add


class TestLookups:
    async def test_get_by_id_and_author(self, repo, add_note):
        await add_note("Aaaaa1")
        assert (await repo.get_by_id("Aaaaa1")).id == "Aaaaa1"
        assert await repo.get_by_id("Missin") is None
        assert (await repo.get_by_id_and_author("Aaaaa1", AUTHOR)) is not None
        assert await repo.get_by_id_and_author("Aaaaa1", "someone") is None

    async def test_exists_and_existing_ids(self, repo, add_note):
        await add_note("Aaaaa1")
        await add_note("Bbbbb2")
        assert await repo.exists("Aaaaa1") is True
        assert await repo.exists("Zzzzz9") is False
        assert await repo.existing_ids(["Aaaaa1", "Zzzzz9", "Bbbbb2"]) == {"Aaaaa1", "Bbbbb2"}
        assert await repo.existing_ids([]) == set()

    async def test_children_ordered_by_creation(self, repo, add_note):
        await add_note("Root01")
        await add_note("Kid002", parent_id="Root01")
        await add_note("Kid001", parent_id="Root01")
        await add_note("Kid003", parent_id="Root01", author_id="other")

        children = await repo.list_children("Root01")
        assert [c.id for c in children] == ["Kid002", "Kid001", "Kid003"]
        mine = await repo.list_children("Root01", author_id=AUTHOR)
        assert [c.id for c in mine] == ["Kid002", "Kid001"]

    async def test_children_of_many_and_descendants(self, repo, add_note):
        await add_note("RootA1")
        await add_note("RootB1")
        await add_note("KidA01", parent_id="RootA1")
        await add_note("KidB01", parent_id="RootB1")

        children = await repo.list_children_of_many(["RootA1", "RootB1"])
        assert {c.id for c in children} == {"KidA01", "KidB01"}
        assert await repo.list_children_of_many([]) == []
        assert [n.id for n in await repo.list_descendants("RootA1")] == ["KidA01"]
        assert await repo.list_descendants("KidA01") == []


class TestRootNotes:
    async def test_newest_first_and_total(self, repo, add_note):
        await add_note("Old001")
        await add_note("New001")
        await add_note("Kid001", parent_id="Old001")

        notes, total = await repo.list_root_notes(AUTHOR, limit=10, offset=0)
        assert [n.id for n in notes] == ["New001", "Old001"]
        assert total == 2

    async def test_limit_offset_hidden_and_channel(self, repo, add_note):
        await add_note("Note01", channel_id="work")
        await add_note("Note02", channel_id="work", is_hidden=True)
        await add_note("Note03", channel_id="home")

        notes, total = await repo.list_root_notes(AUTHOR, limit=1, offset=1)
        assert [n.id for n in notes] == ["Note01"]
        assert total == 2

        notes, total = await repo.list_root_notes(AUTHOR, include_hidden=True, channel_id="work")
        assert [n.id for n in notes] == ["Note02", "Note01"]
        assert total == 2

    async def test_count_replies(self, repo, add_note):
        await add_note("Root01")
        await add_note("Root02")
        await add_note("Kid001", parent_id="Root01")
        await add_note("Kid002", parent_id="Root01")

        assert await repo.count_replies(["Root01", "Root02"]) == {"Root01": 2, "Root02": 0}
        assert await repo.count_replies([]) == {}


class TestWrites:
    async def test_update_content_bumps_updated_at(self, repo, add_note):
        note = await add_note("Edit01", updated_at=BASE_TIME)
        updated = await repo.update_content(note, "changed")
        assert updated.content == "changed"
        assert updated.updated_at > BASE_TIME
        assert updated.updated_at.tzinfo is not None

    async def test_set_hidden_bulk(self, repo, add_note):
        await add_note("Root01")
        await add_note("Kid001", parent_id="Root01")
        await add_note("Root02")

        assert await repo.set_hidden(["Root01", "Kid001"], True) == 2
        assert await repo.set_hidden([], True) == 0
        assert (await repo.get_by_id("Kid001")).is_hidden is True
        assert (await repo.get_by_id("Root02")).is_hidden is False

    async def test_delete_note(self, repo, add_note):
        await add_note("Gone01")
        assert await repo.delete_note("Gone01") is True
        assert await repo.delete_note("Gone01") is False
        assert await repo.get_by_id("Gone01") is None

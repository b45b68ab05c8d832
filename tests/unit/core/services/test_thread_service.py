"""Thread assembler tests."""

from datetime import datetime, timezone

import pytest

from threadnote.core.errors import NoteNotFoundError
from threadnote.core.models import Note

AUTHOR = "author-1"
OTHER = "author-2"


@pytest.fixture
async def thread(create_note):
    """R with replies C1 then C2, plus an unrelated root."""
    root = await create_note("Hello")
    c1 = await create_note("Reply one", parent_id=root.id)
    c2 = await create_note("Reply two", parent_id=root.id)
    await create_note("unrelated")
    return root, c1, c2


class TestGetThread:
    async def test_from_reply_returns_root_then_replies(self, thread_service, thread):
        root, c1, c2 = thread
        result = await thread_service.get_thread(c1.id)
        assert [note.id for note in result] == [root.id, c1.id, c2.id]

    async def test_same_result_from_any_member(self, thread_service, thread):
        ids = [note.id for note in thread]
        results = [
            [note.id for note in await thread_service.get_thread(note_id)] for note_id in ids
        ]
        assert results[0] == results[1] == results[2] == ids

    async def test_ordered_by_depth_then_created_at(self, thread_service, thread):
        result = await thread_service.get_thread(thread[0].id)
        keys = [(note.depth, note.created_at) for note in result]
        assert keys == sorted(keys)

    async def test_single_note_thread(self, thread_service, create_note):
        lonely = await create_note("alone")
        result = await thread_service.get_thread(lonely.id)
        assert [note.id for note in result] == [lonely.id]

    async def test_missing_note(self, thread_service):
        with pytest.raises(NoteNotFoundError):
            await thread_service.get_thread("Abc123")

    async def test_author_filter(self, thread_service, thread):
        root = thread[0]
        assert len(await thread_service.get_thread(root.id, AUTHOR)) == 3
        with pytest.raises(NoteNotFoundError):
            await thread_service.get_thread(root.id, OTHER)

    async def test_walk_is_not_limited_to_one_hop(self, thread_service, test_session):
        # rows written directly to model a deeper chain than MAX_DEPTH allows
        test_session.add_all(
            [
                Note(id="Root00", content="r", author_id=AUTHOR, depth=0),
                Note(id="Mid000", content="m", author_id=AUTHOR, depth=1, parent_id="Root00"),
            ]
        )
        await test_session.flush()
        deep = Note(id="Leaf00", content="l", author_id=AUTHOR, depth=1, parent_id="Mid000")
        test_session.add(deep)
        await test_session.flush()

        result = await thread_service.get_thread("Leaf00")
        assert [note.id for note in result][0] == "Root00"
        assert {note.id for note in result} == {"Root00", "Mid000", "Leaf00"}


class TestGetChildren:
    async def test_direct_children_oldest_first(self, thread_service, thread):
        root, c1, c2 = thread
        result = await thread_service.get_children(root.id)
        assert [note.id for note in result] == [c1.id, c2.id]

    async def test_reply_has_no_children(self, thread_service, thread):
        assert await thread_service.get_children(thread[1].id) == []

    async def test_missing_or_foreign(self, thread_service, thread):
        with pytest.raises(NoteNotFoundError):
            await thread_service.get_children("Abc123")
        with pytest.raises(NoteNotFoundError):
            await thread_service.get_children(thread[0].id, OTHER)


class TestSameTimestampReplies:
    """Replies stamped in the same clock tick are ordered by id."""

    @pytest.fixture
    async def tied(self, test_session):
        stamp = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)
        reply = dict(author_id=AUTHOR, depth=1, parent_id="Root01", created_at=stamp)
        test_session.add(Note(id="Root01", content="r", author_id=AUTHOR, depth=0, created_at=stamp))
        await test_session.flush()
        # inserted in reverse id order
        test_session.add_all(
            [Note(id="Zzz999", content="z", **reply), Note(id="Aaa111", content="a", **reply)]
        )
        await test_session.flush()

    async def test_thread_breaks_ties_by_id(self, thread_service, tied):
        expected = ["Root01", "Aaa111", "Zzz999"]
        for member in expected:
            result = await thread_service.get_thread(member)
            assert [note.id for note in result] == expected

    async def test_children_break_ties_by_id(self, thread_service, tied):
        result = await thread_service.get_children("Root01")
        assert [note.id for note in result] == ["Aaa111", "Zzz999"]

"""Mention service tests: cycle validation and backlinks."""

import pytest

from threadnote.core.errors import CircularReferenceError, NoteNotFoundError

AUTHOR = "author-1"
OTHER = "author-2"


class TestValidateMentions:
    async def test_nothing_proposed(self, mention_service):
        await mention_service.validate_mentions("Abc123", [])

    async def test_rejects_cycle_with_offending_targets(self, mention_service, create_note):
        c = await create_note("c")
        b = await create_note(f"@{c.id}")
        a = await create_note(f"@{b.id}")

        with pytest.raises(CircularReferenceError) as exc_info:
            await mention_service.validate_mentions(c.id, [a.id, "Zzzzzz"])
        assert exc_info.value.to_note_ids == [a.id]
        assert exc_info.value.details()["from_note_id"] == c.id

    async def test_accepts_acyclic(self, mention_service, create_note):
        b = await create_note("b")
        a = await create_note(f"@{b.id}")
        await mention_service.validate_mentions(a.id, [b.id], replace_existing=True)


class TestBacklinks:
    async def test_get_mentions(self, mention_service, create_note):
        target = await create_note("target")
        source = await create_note(f"see @{target.id}")
        await create_note(f"also @{target.id}", author_id=OTHER)

        mentions = await mention_service.get_mentions(target.id, AUTHOR)
        assert [(m.from_note_id, m.to_note_id, m.position) for m in mentions] == [
            (source.id, target.id, 4)
        ]

    async def test_get_mentions_with_notes(self, mention_service, create_note):
        target = await create_note("target")
        first = await create_note(f"@{target.id} first")
        second = await create_note(f"second @{target.id}")

        result = await mention_service.get_mentions_with_notes(target.id, AUTHOR)
        assert [(m.note.id, m.position) for m in result.mentions] == [
            (first.id, 0),
            (second.id, 7),
        ]

    async def test_backlinks_of_foreign_note(self, mention_service, create_note):
        foreign = await create_note("theirs", author_id=OTHER)
        with pytest.raises(NoteNotFoundError):
            await mention_service.get_mentions_with_notes(foreign.id, AUTHOR)

    async def test_no_backlinks(self, mention_service, create_note):
        target = await create_note("quiet")
        result = await mention_service.get_mentions_with_notes(target.id, AUTHOR)
        assert result.mentions == []

import pytest

from ainotes.errors import NoteDeleteError, NoteUpdateError, SummarizationError
from ainotes.models import InvalidationReason, NoteCreate, NoteUpdate

from conftest import GROCERY_SUMMARY


async def test_create_note_has_no_summary_and_equal_timestamps(note_service):
    note = await note_service.create_note(
        "user-alice", NoteCreate(title="Groceries", content="Buy milk and eggs")
    )
    assert note.id
    assert note.user_id == "user-alice"
    assert note.summary is None
    assert note.created_at == note.updated_at

    stored = await note_service.get_note("user-alice", note.id)
    assert stored == note


async def test_list_notes_is_newest_first(note_service):
    first = await note_service.create_note("user-alice", NoteCreate(title="one", content="1"))
    second = await note_service.create_note("user-alice", NoteCreate(title="two", content="2"))

    notes = await note_service.list_notes("user-alice")
    assert [n.id for n in notes] == [second.id, first.id]

    await note_service.update_note("user-alice", first.id, NoteUpdate(title="one again"))
    notes = await note_service.list_notes("user-alice")
    assert [n.id for n in notes] == [first.id, second.id]


async def test_notes_are_isolated_per_user(note_service):
    alice_note = await note_service.create_note("user-alice", NoteCreate(title="a", content="a"))
    await note_service.create_note("user-bob", NoteCreate(title="b", content="b"))

    bob_notes = await note_service.list_notes("user-bob")
    assert all(n.user_id == "user-bob" for n in bob_notes)
    assert alice_note.id not in {n.id for n in bob_notes}
    assert await note_service.get_note("user-bob", alice_note.id) is None


async def test_updated_at_strictly_increases(note_service):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))
    previous = note.updated_at
    for i in range(5):
        note = await note_service.update_note("user-alice", note.id, NoteUpdate(content=f"c{i}"))
        assert note.updated_at > previous
        previous = note.updated_at
    assert note.created_at < note.updated_at


async def test_update_without_fields_still_bumps_updated_at(note_service):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))
    updated = await note_service.update_note("user-alice", note.id, NoteUpdate())
    assert updated.updated_at > note.updated_at
    assert updated.title == "t"


async def test_update_foreign_or_missing_note_fails(note_service):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))

    with pytest.raises(NoteUpdateError):
        await note_service.update_note("user-bob", note.id, NoteUpdate(title="mine now"))
    with pytest.raises(NoteUpdateError):
        await note_service.update_note("user-alice", "no-such-id", NoteUpdate(title="x"))

    assert (await note_service.get_note("user-alice", note.id)).title == "t"


async def test_delete_twice_reports_generic_failure(note_service):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))

    await note_service.delete_note("user-alice", note.id)
    assert await note_service.get_note("user-alice", note.id) is None

    with pytest.raises(NoteDeleteError) as exc_info:
        await note_service.delete_note("user-alice", note.id)
    assert exc_info.value.message == "Failed to delete the note"


async def test_delete_foreign_note_fails(note_service):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))
    with pytest.raises(NoteDeleteError):
        await note_service.delete_note("user-bob", note.id)
    assert await note_service.get_note("user-alice", note.id) is not None


async def test_mutations_publish_one_invalidation_each(note_service, published):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))
    await note_service.update_note("user-alice", note.id, NoteUpdate(title="t2"))
    await note_service.summarize_note("user-alice", note.id)
    await note_service.delete_note("user-alice", note.id)

    assert [e.reason for e in published] == [
        InvalidationReason.NOTE_CREATE,
        InvalidationReason.NOTE_UPDATE,
        InvalidationReason.NOTE_SUMMARIZE,
        InvalidationReason.NOTE_DELETE,
    ]
    assert all(e.user_id == "user-alice" and e.note_id == note.id for e in published)


async def test_failed_mutations_publish_nothing(note_service, published):
    with pytest.raises(NoteUpdateError):
        await note_service.update_note("user-alice", "missing", NoteUpdate(title="x"))
    with pytest.raises(NoteDeleteError):
        await note_service.delete_note("user-alice", "missing")
    assert published == []


async def test_summarize_note_persists_provider_text(note_service, summarizer):
    note = await note_service.create_note(
        "user-alice", NoteCreate(title="Groceries", content="Buy milk and eggs")
    )

    summarized = await note_service.summarize_note("user-alice", note.id)

    assert summarized.summary == GROCERY_SUMMARY
    assert summarized.updated_at > note.updated_at
    assert "Buy milk and eggs" in summarizer.prompts[0]
    stored = await note_service.get_note("user-alice", note.id)
    assert stored.summary == GROCERY_SUMMARY


async def test_summarize_overwrites_previous_summary(note_service, summarizer):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))
    await note_service.summarize_note("user-alice", note.id)

    summarizer.summary = "Second take."
    again = await note_service.summarize_note("user-alice", note.id)
    assert again.summary == "Second take."


async def test_summarize_failure_leaves_note_untouched(note_service, summarizer, published):
    note = await note_service.create_note("user-alice", NoteCreate(title="t", content="c"))
    published.clear()
    summarizer.fail = True

    with pytest.raises(SummarizationError):
        await note_service.summarize_note("user-alice", note.id)

    stored = await note_service.get_note("user-alice", note.id)
    assert stored.summary is None
    assert stored.updated_at == note.updated_at
    assert published == []


async def test_summarize_missing_note_skips_provider(note_service, summarizer):
    with pytest.raises(NoteUpdateError):
        await note_service.summarize_note("user-alice", "missing")
    assert summarizer.calls == 0

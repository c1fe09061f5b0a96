"""View-models for the notes dashboard: list, card and editor dialog."""

from typing import Optional

from ainotes.logging import get_logger
from ainotes.models import InvalidationReason, Note, NoteCreate, NoteUpdate
from ainotes.services.invalidation import InvalidationChannel
from ainotes.services.notes import NoteService
from ainotes.services.sessions import SessionContext
from ainotes.services.summarizer import Summarizer
from ainotes.views.base import Toaster, guarded
from ainotes.views.query import NotesQuery

logger = get_logger("views.notes")

LOAD_ERROR = "Error loading notes. Please try again."


class NoteEditor:
    """Create/edit dialog. Summarize is offered only for existing notes."""

    def __init__(
        self,
        service: NoteService,
        summarizer: Summarizer,
        session: SessionContext,
        toaster: Toaster,
        note: Optional[Note] = None,
    ):
        self.service = service
        self.summarizer = summarizer
        self.session = session
        self.toaster = toaster
        self.note = note
        self.title = note.title if note else ""
        self.content = note.content if note else ""
        self.errors: dict[str, str] = {}
        self.is_open = True
        self.is_saving = False
        self.is_summarizing = False

    @property
    def is_editing(self) -> bool:
        return self.note is not None

    @property
    def can_summarize(self) -> bool:
        return self.is_editing and not self.is_summarizing

    def validate(self) -> bool:
        self.errors = {}
        if not self.title.strip():
            self.errors["title"] = "Title is required"
        if not self.content.strip():
            self.errors["content"] = "Content is required"
        return not self.errors

    def close(self) -> None:
        self.is_open = False

    async def submit(self) -> Optional[Note]:
        if not self.validate():
            return None

        self.is_saving = True
        try:
            if self.is_editing:
                result = await guarded(
                    self.toaster,
                    "updating note",
                    self._update,
                    "Note updated. Your note has been updated successfully.",
                    "Update failed. Failed to update the note. Please try again.",
                )
            else:
                result = await guarded(
                    self.toaster,
                    "creating note",
                    self._create,
                    "Note created. Your note has been created successfully.",
                    "Create failed. Failed to create the note. Please try again.",
                )
        finally:
            self.is_saving = False

        if result is not None:
            self.close()
        return result

    async def summarize(self) -> Optional[Note]:
        if not self.can_summarize:
            return None

        self.is_summarizing = True
        try:
            result = await guarded(
                self.toaster,
                "summarizing note",
                self._summarize,
                "Note summarized successfully.",
                "Failed to summarize note. Please try again.",
            )
        finally:
            self.is_summarizing = False

        if result is not None:
            self.close()
        return result

    async def _create(self) -> Note:
        session = self.session.require()
        return await self.service.create_note(
            session.user_id, NoteCreate(title=self.title, content=self.content)
        )

    async def _update(self) -> Note:
        session = self.session.require()
        return await self.service.update_note(
            session.user_id,
            self.note.id,
            NoteUpdate(title=self.title, content=self.content),
        )

    async def _summarize(self) -> Note:
        session = self.session.require()
        # Summarizes the form's current content, saved or not.
        summary = await self.summarizer.summarize(self.content)
        return await self.service.update_note(
            session.user_id,
            self.note.id,
            NoteUpdate(summary=summary),
            reason=InvalidationReason.NOTE_SUMMARIZE,
        )


class NoteCard:
    def __init__(self, note: Note, service: NoteService, session: SessionContext, toaster: Toaster):
        self.note = note
        self.service = service
        self.session = session
        self.toaster = toaster
        self.is_deleting = False

    @property
    def has_summary(self) -> bool:
        return bool(self.note.summary)

    async def delete(self) -> bool:
        self.is_deleting = True
        try:
            result = await guarded(
                self.toaster,
                "deleting note",
                self._delete,
                "Note deleted. Your note has been deleted successfully.",
                "Delete failed. Failed to delete the note. Please try again.",
            )
        finally:
            self.is_deleting = False
        return result is not None

    async def _delete(self) -> bool:
        session = self.session.require()
        await self.service.delete_note(session.user_id, self.note.id)
        return True


class NotesListView:
    """The user's notes, newest first, with create/edit entry points."""

    def __init__(
        self,
        service: NoteService,
        summarizer: Summarizer,
        channel: InvalidationChannel,
        session: SessionContext,
        toaster: Toaster,
    ):
        self.service = service
        self.summarizer = summarizer
        self.session = session
        self.toaster = toaster
        self.query = NotesQuery(service, channel, session.require().user_id)
        self.notes: list[Note] = []
        self.error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.error is None and not self.notes

    async def load(self) -> list[Note]:
        try:
            self.notes = await self.query.get()
            self.error = None
        except Exception:
            logger.exception(f"Error loading notes for user {self.query.user_id}")
            self.error = LOAD_ERROR
            self.notes = []
        return self.notes

    def cards(self) -> list[NoteCard]:
        return [NoteCard(n, self.service, self.session, self.toaster) for n in self.notes]

    def open_create(self) -> NoteEditor:
        return NoteEditor(self.service, self.summarizer, self.session, self.toaster)

    def open_edit(self, note: Note) -> NoteEditor:
        return NoteEditor(self.service, self.summarizer, self.session, self.toaster, note=note)

    def close(self) -> None:
        self.query.close()

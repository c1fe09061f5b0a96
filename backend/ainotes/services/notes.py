"""Note CRUD and summary persistence, scoped to the owning user."""

from datetime import datetime, timedelta, timezone

import aiosqlite

from ainotes.database.db import connect
from ainotes.errors import NoteCreateError, NoteDeleteError, NoteUpdateError
from ainotes.logging import get_logger
from ainotes.models import InvalidationReason, Note, NoteCreate, NoteUpdate
from ainotes.services.invalidation import InvalidationChannel
from ainotes.services.summarizer import Summarizer

logger = get_logger("services.notes")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _stamp(value: datetime) -> str:
    return value.isoformat(timespec="microseconds")


def _next_updated_at(previous: datetime) -> datetime:
    # Clock resolution can repeat a timestamp; updated_at must still advance.
    now = _now()
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def _row_to_note(row: dict) -> Note:
    return Note(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        content=row["content"],
        summary=row.get("summary"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class NoteService:
    """Service for the notes table. Every query filters on ``user_id``."""

    def __init__(
        self,
        db_path: str,
        invalidation: InvalidationChannel,
        summarizer: Summarizer,
    ):
        self.db_path = db_path
        self.invalidation = invalidation
        self.summarizer = summarizer

    async def list_notes(self, user_id: str) -> list[Note]:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM notes WHERE user_id = ? ORDER BY updated_at DESC",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_note(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get_note(self, user_id: str, note_id: str) -> Note | None:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM notes WHERE id = ? AND user_id = ?",
                (note_id, user_id),
            )
            row = await cursor.fetchone()
            return _row_to_note(dict(row)) if row else None
        finally:
            await db.close()

    async def create_note(self, user_id: str, data: NoteCreate) -> Note:
        now = _now()
        note = Note(
            user_id=user_id,
            title=data.title,
            content=data.content,
            summary=None,
            created_at=now,
            updated_at=now,
        )
        db = await connect(self.db_path)
        try:
            await db.execute(
                """INSERT INTO notes (id, user_id, title, content, summary, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    note.id,
                    note.user_id,
                    note.title,
                    note.content,
                    note.summary,
                    _stamp(note.created_at),
                    _stamp(note.updated_at),
                ),
            )
            await db.commit()
        except aiosqlite.Error as e:
            logger.error(f"Failed to create note for user {user_id}: {e}")
            raise NoteCreateError() from e
        finally:
            await db.close()

        logger.info(f"Created note {note.id} for user {user_id}")
        await self.invalidation.publish(user_id, InvalidationReason.NOTE_CREATE, note.id)
        return note

    async def update_note(
        self,
        user_id: str,
        note_id: str,
        data: NoteUpdate,
        reason: InvalidationReason = InvalidationReason.NOTE_UPDATE,
    ) -> Note:
        existing = await self.get_note(user_id, note_id)
        if not existing:
            logger.warning(f"Update of missing or foreign note {note_id} by user {user_id}")
            raise NoteUpdateError()

        fields: dict = {}
        if data.title is not None:
            fields["title"] = data.title
        if data.content is not None:
            fields["content"] = data.content
        if data.summary is not None:
            fields["summary"] = data.summary
        fields["updated_at"] = _stamp(_next_updated_at(existing.updated_at))

        set_clause = ", ".join(f"{k} = ?" for k in fields)
        params = list(fields.values()) + [note_id, user_id]
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                f"UPDATE notes SET {set_clause} WHERE id = ? AND user_id = ?",
                params,
            )
            await db.commit()
            updated_rows = cursor.rowcount
        except aiosqlite.Error as e:
            logger.error(f"Failed to update note {note_id}: {e}")
            raise NoteUpdateError() from e
        finally:
            await db.close()

        # Deleted between the read and the write
        if updated_rows == 0:
            raise NoteUpdateError()

        note = await self.get_note(user_id, note_id)
        if not note:
            raise NoteUpdateError()
        await self.invalidation.publish(user_id, reason, note_id)
        return note

    async def delete_note(self, user_id: str, note_id: str) -> None:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "DELETE FROM notes WHERE id = ? AND user_id = ?",
                (note_id, user_id),
            )
            await db.commit()
            deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            logger.error(f"Failed to delete note {note_id}: {e}")
            raise NoteDeleteError() from e
        finally:
            await db.close()

        if not deleted:
            logger.warning(f"Delete of missing or foreign note {note_id} by user {user_id}")
            raise NoteDeleteError()

        logger.info(f"Deleted note {note_id} for user {user_id}")
        await self.invalidation.publish(user_id, InvalidationReason.NOTE_DELETE, note_id)

    async def summarize_note(self, user_id: str, note_id: str) -> Note:
        """
        Summarize a stored note and persist the summary onto it.

        :param user_id: Owner of the note
        :type user_id: str
        :param note_id: Note to summarize
        :type note_id: str
        :return: The note with its new summary and advanced ``updated_at``
        :rtype: Note
        :raises NoteUpdateError: If the note does not exist for this user
        :raises SummarizationError: If the provider fails
        """
        note = await self.get_note(user_id, note_id)
        if not note:
            raise NoteUpdateError()

        summary = await self.summarizer.summarize(note.content)
        return await self.update_note(
            user_id,
            note_id,
            NoteUpdate(summary=summary),
            reason=InvalidationReason.NOTE_SUMMARIZE,
        )

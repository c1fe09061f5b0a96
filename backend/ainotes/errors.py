"""
Error taxonomy for the AI Notes API.

Every error carries a fixed, user-facing message and the HTTP status it maps
to. Underlying causes are logged where they happen and never rendered.
"""


class NotesAppError(Exception):
    """Base class for errors surfaced to API clients and views."""

    status_code: int = 500
    message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ContentRequiredError(NotesAppError, ValueError):
    status_code = 400
    message = "Content is required"


class UnauthorizedError(NotesAppError):
    status_code = 401
    message = "Unauthorized"


class SummarizationError(NotesAppError):
    status_code = 500
    message = "Failed to summarize content"


class NoteNotFoundError(NotesAppError, LookupError):
    status_code = 404
    message = "Note not found"


class NoteCreateError(NotesAppError):
    status_code = 500
    message = "Failed to create the note"


class NoteUpdateError(NotesAppError):
    status_code = 404
    message = "Failed to update the note"


class NoteDeleteError(NotesAppError):
    status_code = 404
    message = "Failed to delete the note"

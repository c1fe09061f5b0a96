"""Domain models: the core data structures of the notes app."""

from ainotes.models.domain.note import Note, NoteCreate, NoteUpdate
from ainotes.models.domain.session import Session, SignInCredentials, SignUpCredentials
from ainotes.models.domain.summarize import SummarizeRequest, SummarizeResponse, ErrorResponse
from ainotes.models.domain.events import AuthStateChange, Invalidation, Notification

__all__ = [
    "Note", "NoteCreate", "NoteUpdate",
    "Session", "SignInCredentials", "SignUpCredentials",
    "SummarizeRequest", "SummarizeResponse", "ErrorResponse",
    "AuthStateChange", "Invalidation", "Notification",
]

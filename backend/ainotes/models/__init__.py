"""
AI Notes models.

Usage:
    from ainotes.models import Note, NoteCreate, NoteUpdate, Session
    from ainotes.models import AuthChangeEvent, InvalidationReason
    from ainotes.models import SignInResult, SignOutResult
"""

# --- Enums ---
from ainotes.models.enums import (
    AuthChangeEvent,
    InvalidationReason,
    NotificationLevel,
)

# --- Domain models ---
from ainotes.models.domain import (
    Note, NoteCreate, NoteUpdate,
    Session, SignInCredentials, SignUpCredentials,
    SummarizeRequest, SummarizeResponse, ErrorResponse,
    AuthStateChange, Invalidation, Notification,
)

# --- Result models ---
from ainotes.models.results import (
    AuthResult, SignInResult, SignUpResult, SignOutResult, UserResult,
)

__all__ = [
    # Enums
    "AuthChangeEvent", "InvalidationReason", "NotificationLevel",
    # Domain
    "Note", "NoteCreate", "NoteUpdate",
    "Session", "SignInCredentials", "SignUpCredentials",
    "SummarizeRequest", "SummarizeResponse", "ErrorResponse",
    "AuthStateChange", "Invalidation", "Notification",
    # Results
    "AuthResult", "SignInResult", "SignUpResult", "SignOutResult", "UserResult",
]

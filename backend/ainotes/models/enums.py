"""
Enum definitions for the AI Notes API.
"""
from enum import Enum


class AuthChangeEvent(str, Enum):
    """Session change notifications emitted by the auth provider."""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class InvalidationReason(str, Enum):
    """Why a user's cached note list went stale."""
    NOTE_CREATE = "note_create"
    NOTE_UPDATE = "note_update"
    NOTE_SUMMARIZE = "note_summarize"
    NOTE_DELETE = "note_delete"


class NotificationLevel(str, Enum):
    """Severity of a user-facing notification."""
    SUCCESS = "success"
    ERROR = "error"

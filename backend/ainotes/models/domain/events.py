"""Event payloads passed between services and views."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from ainotes.models.domain.session import Session
from ainotes.models.enums import AuthChangeEvent, InvalidationReason, NotificationLevel


class AuthStateChange(BaseModel):
    """A sign-in or sign-out observed by the auth client."""
    event: AuthChangeEvent
    session: Optional[Session] = None


class Invalidation(BaseModel):
    """Signal that a user's note list must be refetched."""
    user_id: str
    reason: InvalidationReason
    note_id: Optional[str] = None
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Notification(BaseModel):
    """A toast shown to the user after an action settles."""
    level: NotificationLevel
    message: str

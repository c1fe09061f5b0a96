"""Note domain model."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4


def _require_text(value: Optional[str], label: str) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError(f"{label} is required")
    return value


class NoteCreate(BaseModel):
    """Payload for creating a note."""
    title: str
    content: str

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        return _require_text(value, "Title")

    @field_validator("content")
    @classmethod
    def _content_required(cls, value: str) -> str:
        return _require_text(value, "Content")


class NoteUpdate(BaseModel):
    """Partial update: any of title, content, summary."""
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value, "Title")

    @field_validator("content")
    @classmethod
    def _content_required(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value, "Content")


class Note(BaseModel):
    """A user-owned text note with an optional AI-generated summary."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    content: str
    summary: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

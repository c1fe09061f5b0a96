"""Summarization request/response models."""

from typing import Any

from pydantic import BaseModel


class SummarizeRequest(BaseModel):
    """
    Body of ``POST /api/summarize``.

    ``content`` is typed loosely so that a missing or non-string value is
    reported as "Content is required" rather than a schema error.
    """
    content: Any = None


class SummarizeResponse(BaseModel):
    summary: str


class ErrorResponse(BaseModel):
    error: str

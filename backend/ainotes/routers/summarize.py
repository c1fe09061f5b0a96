"""Summarization route."""

from typing import Any

from fastapi import APIRouter, Request

from ainotes.dependencies import SessionDep, SummarizerDep
from ainotes.models import ErrorResponse, SummarizeRequest, SummarizeResponse

router = APIRouter()


async def _read_content(request: Request) -> Any:
    # An absent or unparseable body carries no content.
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return SummarizeRequest.model_validate(body).content


@router.post(
    "",
    response_model=SummarizeResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": SummarizeRequest.model_json_schema()}},
        },
    },
)
async def summarize(request: Request, session: SessionDep, summarizer: SummarizerDep):
    """
    Summarize arbitrary content for a signed-in user.

    The body is read only after the session check, so unauthenticated
    requests are refused with 401 whatever they carry.
    """
    content = await _read_content(request)
    summary = await summarizer.summarize(content)
    return SummarizeResponse(summary=summary)

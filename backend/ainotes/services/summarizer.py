"""
Note summarization.

``Summarizer`` is the capability the rest of the app depends on; exactly one
concrete provider is wired in per deployment by ``build_summarizer``.
"""

from abc import ABC, abstractmethod

from google import genai
from google.genai import types

from ainotes.config import Settings
from ainotes.errors import ContentRequiredError, SummarizationError
from ainotes.logging import get_logger
from ainotes.services.prompts import build_summary_prompt

logger = get_logger('services.summarizer')


def require_content(content: object) -> str:
    """
    Validate summarization input before any provider call.

    :param content: Raw content from the caller
    :type content: object
    :return: The content, unchanged
    :rtype: str
    :raises ContentRequiredError: If content is not a non-blank string
    """
    if not isinstance(content, str) or not content.strip():
        raise ContentRequiredError()
    return content


class Summarizer(ABC):
    """Reduces note content to a short text summary."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        ...

    async def summarize(self, content: str) -> str:
        """
        Summarize ``content``.

        :param content: Note content; must be non-blank
        :type content: str
        :return: The provider's summary text, unmodified
        :rtype: str
        :raises ContentRequiredError: If content is blank
        :raises SummarizationError: On any provider or configuration failure
        """
        text = require_content(content)
        return await self._generate(build_summary_prompt(text))

    @abstractmethod
    async def _generate(self, prompt: str) -> str:
        ...


class GeminiSummarizer(Summarizer):
    """Summarizer backed by a Google Gemini model through the ``google-genai`` client."""

    def __init__(self, api_key: str, model_name: str, timeout_seconds: float = 60.0):
        self.model_name = model_name
        # google-genai takes its HTTP timeout in milliseconds
        self.timeout_ms = int(timeout_seconds * 1000)
        self.client = None

        if not api_key:
            logger.warning("GEMINI_API_KEY not set - summarization requests will fail")
            return

        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=self.timeout_ms),
        )
        logger.info(f"Gemini summarizer initialized with model {model_name}")

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def _generate(self, prompt: str) -> str:
        if not self.is_available:
            logger.error("Summarization requested but GEMINI_API_KEY is not configured")
            raise SummarizationError()

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
            )
            summary = response.text
        except Exception as e:
            logger.error(f"Gemini summarization failed ({self.model_name}): {e}")
            raise SummarizationError() from e

        if not summary:
            logger.error(f"Gemini returned an empty summary ({self.model_name})")
            raise SummarizationError()

        logger.debug("Gemini summary generated (%d chars)", len(summary))
        return summary


def build_summarizer(settings: Settings) -> Summarizer:
    return GeminiSummarizer(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        timeout_seconds=settings.SUMMARIZER_TIMEOUT_SECONDS,
    )

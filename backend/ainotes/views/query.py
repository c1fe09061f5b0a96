"""Client-side cache of a user's note list."""

from typing import Optional

from ainotes.logging import get_logger
from ainotes.models import Invalidation, Note
from ainotes.services.invalidation import InvalidationChannel
from ainotes.services.notes import NoteService
from ainotes.services.events import Subscription

logger = get_logger('views.query')


class NotesQuery:
    """
    Cached ``list_notes`` result for one user.

    The cache goes stale whenever the invalidation channel signals a
    mutation for that user; the next ``get`` refetches.
    """

    def __init__(self, service: NoteService, channel: InvalidationChannel, user_id: str):
        self.service = service
        self.user_id = user_id
        self.data: Optional[list[Note]] = None
        self.is_stale = True
        self.fetch_count = 0
        self._subscription: Optional[Subscription] = channel.subscribe_user(user_id, self._on_invalidate)

    async def get(self) -> list[Note]:
        if self.is_stale or self.data is None:
            self.data = await self.service.list_notes(self.user_id)
            self.fetch_count += 1
            self.is_stale = False
        return self.data

    def invalidate(self) -> None:
        self.is_stale = True

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_invalidate(self, invalidation: Invalidation) -> None:
        logger.debug(f"Notes cache for {self.user_id} stale ({invalidation.reason.value})")
        self.invalidate()

"""
Note-list cache invalidation.

Every successful mutation publishes an ``Invalidation`` for the owning user.
In-process caches subscribe per user; ``SocketIOInvalidationBridge`` forwards
the same signal to the browsers in that user's Socket.IO room.
"""

from typing import Optional

import socketio

from ainotes.logging import get_logger
from ainotes.models import Invalidation, InvalidationReason
from ainotes.services.events import EventHub, Listener, Subscription

logger = get_logger('services.invalidation')

INVALIDATED_EVENT = "notes:invalidated"


class InvalidationChannel(EventHub[Invalidation]):
    def __init__(self):
        super().__init__("invalidation")

    def subscribe_user(self, user_id: str, listener: Listener) -> Subscription:
        return self.subscribe(listener, topic=user_id)

    async def publish(
        self,
        user_id: str,
        reason: InvalidationReason,
        note_id: Optional[str] = None,
    ) -> Invalidation:
        invalidation = Invalidation(user_id=user_id, reason=reason, note_id=note_id)
        logger.debug(
            "Invalidating notes for user=%s reason=%s note=%s",
            user_id,
            reason.value,
            note_id,
        )
        await self._emit(user_id, invalidation)
        return invalidation


class SocketIOInvalidationBridge:
    """Relays invalidations to ``notes:invalidated`` in the user's room."""

    def __init__(self, sio: socketio.AsyncServer, channel: InvalidationChannel):
        self.sio = sio
        self.channel = channel
        self._subscription: Optional[Subscription] = None

    def start(self) -> None:
        if self._subscription is None:
            self._subscription = self.channel.subscribe(self._forward)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _forward(self, invalidation: Invalidation) -> None:
        await self.sio.emit(
            INVALIDATED_EVENT,
            {
                "reason": invalidation.reason.value,
                "note_id": invalidation.note_id,
                "at": invalidation.at.isoformat(),
            },
            room=invalidation.user_id,
        )

"""
In-process publish/subscribe.

Listeners may be plain callables or coroutine functions. A failing listener
is logged and does not stop delivery to the others.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Optional, TypeVar

from ainotes.logging import get_logger

logger = get_logger('services.events')

_E = TypeVar("_E")
Listener = Callable[[_E], Optional[Awaitable[None]]]


class Subscription:
    """Handle returned by ``subscribe``; call ``unsubscribe`` on teardown."""

    def __init__(self, hub: "EventHub[Any]", topic: Optional[str], listener: Listener):
        self._hub = hub
        self._topic = topic
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self._hub._remove(self._topic, self._listener)
        self.active = False


class EventHub(Generic[_E]):
    """Topic-keyed listener registry. ``None`` topic receives everything."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: dict[Optional[str], list[Listener]] = {}

    def subscribe(self, listener: Listener, topic: Optional[str] = None) -> Subscription:
        self._listeners.setdefault(topic, []).append(listener)
        return Subscription(self, topic, listener)

    def listener_count(self, topic: Optional[str] = None) -> int:
        return len(self._listeners.get(topic, []))

    def _remove(self, topic: Optional[str], listener: Listener) -> None:
        listeners = self._listeners.get(topic, [])
        if listener in listeners:
            listeners.remove(listener)
        if not listeners:
            self._listeners.pop(topic, None)

    async def _emit(self, topic: Optional[str], event: _E) -> None:
        targets = list(self._listeners.get(topic, []))
        if topic is not None:
            targets += self._listeners.get(None, [])

        for listener in targets:
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"{self.name} listener failed")

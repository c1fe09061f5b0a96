"""Shared plumbing for view-models: toasts and guarded actions."""

from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

from ainotes.logging import get_logger
from ainotes.models import Notification, NotificationLevel

logger = get_logger('views')

_T = TypeVar("_T")


class Toaster:
    """Collects notifications in the order they were raised."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def success(self, message: str) -> None:
        self.notifications.append(Notification(level=NotificationLevel.SUCCESS, message=message))

    def error(self, message: str) -> None:
        self.notifications.append(Notification(level=NotificationLevel.ERROR, message=message))

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def messages(self) -> list[str]:
        return [n.message for n in self.notifications]


async def guarded(
    toaster: Toaster,
    action_name: str,
    action: Callable[[], Awaitable[_T]],
    success_message: Optional[str],
    failure_message: str,
) -> Optional[_T]:
    """
    Run ``action`` so that no failure escapes to the caller.

    On success the optional success toast is raised and the result returned.
    On any exception the cause is logged, the fixed failure toast is raised
    and None is returned.
    """
    try:
        result = await action()
    except Exception:
        logger.exception(f"Error during {action_name}")
        toaster.error(failure_message)
        return None

    if success_message:
        toaster.success(success_message)
    return result

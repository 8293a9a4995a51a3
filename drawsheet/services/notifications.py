from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

"""Notification registry.

Explicit subscriber registry for user-facing notices (import succeeded, column
missing, ...). Whoever shows notices owns a registry instance and subscribes to
it; producers only call notify(). Nothing is kept at module level.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "NotificationKind",
    "Notification",
    "NotificationRegistry",
]


class NotificationKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str | None = None


Listener = Callable[[Notification], None]


class NotificationRegistry:
    """Registry of notification listeners.

    Listeners are called in subscription order. A listener that raises is
    logged and skipped so one broken consumer cannot starve the others.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners = [l for l in self._listeners if l is not listener]

    def notify(self, notification: Notification) -> None:
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.warning(f"notification listener failed: {e}")

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)

"""Transient user-visible notifications.

The rendering layer subscribes to show toasts; every notification is
also logged.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

import structlog

logger = structlog.get_logger()


class NotificationLevel(str, Enum):
    """Notification severity."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single notification."""

    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    """Fans notifications out to listeners and keeps a short history."""

    MAX_HISTORY_SIZE = 50

    def __init__(self) -> None:
        self._listeners: list[NotificationListener] = []
        self._history: list[Notification] = []

    @property
    def history(self) -> tuple[Notification, ...]:
        return tuple(self._history)

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Called with every new notification.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def success(self, message: str) -> Notification:
        return self._emit(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self._emit(NotificationLevel.ERROR, message)

    def _emit(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._history.append(notification)
        if len(self._history) > self.MAX_HISTORY_SIZE:
            self._history = self._history[-self.MAX_HISTORY_SIZE:]

        logger.info("Notification", notification_level=level.value, message=message)
        for listener in list(self._listeners):
            listener(notification)
        return notification

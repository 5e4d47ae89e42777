"""
Transient user notifications.

The terminal counterpart of toast messages: each notification is logged,
optionally written to a stream, and kept in history so callers (and tests)
can inspect what the user was told.
"""
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TextIO

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


class Notifier:
    """Collects notifications and echoes them to a stream."""

    def __init__(self, stream: Optional[TextIO] = None, echo: bool = True):
        self._stream = stream
        self._echo = echo
        self.history: List[Notification] = []

    def success(self, message: str) -> None:
        self._notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> None:
        self._notify(NotificationLevel.INFO, message)

    def error(self, message: str) -> None:
        self._notify(NotificationLevel.ERROR, message)

    def _notify(self, level: NotificationLevel, message: str) -> None:
        notification = Notification(level=level, message=message)
        self.history.append(notification)

        logger.debug(f"Notification ({level.value}): {message}")

        if self._echo:
            stream = self._stream or sys.stderr
            stream.write(f"[{level.value}] {message}\n")
            stream.flush()

    def messages(self, level: Optional[NotificationLevel] = None) -> List[str]:
        """Return notification messages, optionally filtered by level."""
        return [n.message for n in self.history if level is None or n.level is level]

"""Notification interface used by the view-state components.

Components never talk to a UI toolkit directly. They report user-visible
outcomes ("Contact added to timeline.", "Error loading history") to a
Notifier passed in by whoever hosts them.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class Variant(StrEnum):
    """Severity of a notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A transient message for the user."""

    title: str
    message: str
    variant: Variant = Variant.INFO


class Notifier(Protocol):
    """Receives notifications from view-state components."""

    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Writes notifications to the log (used by the CLI)."""

    _levels = {
        Variant.SUCCESS: logging.INFO,
        Variant.INFO: logging.INFO,
        Variant.WARNING: logging.WARNING,
        Variant.ERROR: logging.ERROR,
    }

    def notify(self, notification: Notification) -> None:
        logger.log(
            self._levels[notification.variant],
            f"{notification.title}: {notification.message}",
        )


@dataclass
class CollectingNotifier:
    """Keeps every notification in memory, newest last."""

    notifications: list[Notification] = field(default_factory=list)

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()

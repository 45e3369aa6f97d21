"""Load-state machine and request sequencing shared by the viewer and the report."""

import logging
from enum import StrEnum

logger = logging.getLogger(__name__)


class LoadState(StrEnum):
    """idle → loading → ready | error; ready → loading on load-more.

    error is left only by an explicit retry (refresh / apply / load).
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class RequestSequencer:
    """Hands out tickets so only the newest response on a channel is applied.

    Overlapping requests (e.g. "apply filters" clicked twice) can resolve
    out of order. Each request takes a ticket before it is sent; when its
    response arrives, is_current() tells whether a newer request has been
    issued on the same channel since, in which case the response is dropped.
    """

    def __init__(self) -> None:
        self._latest: dict[str, int] = {}

    def next(self, channel: str = "default") -> int:
        ticket = self._latest.get(channel, 0) + 1
        self._latest[channel] = ticket
        return ticket

    def is_current(self, ticket: int, channel: str = "default") -> bool:
        current = self._latest.get(channel, 0) == ticket
        if not current:
            logger.debug(f"Discarding stale response on {channel!r} (ticket {ticket})")
        return current

    def invalidate(self, channel: str = "default") -> None:
        """Make every in-flight ticket on a channel stale."""
        self.next(channel)

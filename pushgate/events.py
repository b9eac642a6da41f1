"""Process-wide queue of events for the UI to surface (e.g. in the status bar)."""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger(__name__)


class InternalEventKind(Enum):
    PUSH_FAILED = auto()


@dataclass(frozen=True)
class InternalEvent:
    kind: InternalEventKind
    message: str


class EventQueue:
    """Many producers append, a single consumer drains.

    Producers never block and never see an error.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[InternalEvent] = queue.Queue()

    def push(self, event: InternalEvent) -> None:
        self._queue.put_nowait(event)
        logger.debug("Event queued: %s", event.kind.name)

    def drain(self) -> list[InternalEvent]:
        """Remove and return every queued event, oldest first."""
        events: list[InternalEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return events

    def empty(self) -> bool:
        return self._queue.empty()

"""Tests for pushgate/events.py — EventQueue."""

from __future__ import annotations

import threading

from pushgate.events import EventQueue, InternalEvent, InternalEventKind


def _event(n: int) -> InternalEvent:
    return InternalEvent(InternalEventKind.PUSH_FAILED, f"failure {n}")


class TestEventQueue:
    def test_new_queue_is_empty(self) -> None:
        q = EventQueue()
        assert q.empty()
        assert q.drain() == []

    def test_drain_returns_oldest_first_and_empties(self) -> None:
        q = EventQueue()
        for n in range(3):
            q.push(_event(n))
        assert q.drain() == [_event(0), _event(1), _event(2)]
        assert q.empty()

    def test_concurrent_producers_lose_nothing(self) -> None:
        q = EventQueue()

        def produce(offset: int) -> None:
            for n in range(50):
                q.push(_event(offset + n))

        threads = [threading.Thread(target=produce, args=(i * 100,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(q.drain()) == 200

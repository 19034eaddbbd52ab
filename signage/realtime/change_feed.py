"""Fan-out of table change notifications to every interested subscriber.

Events carry the table, the kind of mutation and the affected row id only.
Subscribers are expected to re-read the full state they display; nothing
here tries to patch client state from the event itself, so delivering an
event twice or out of order is harmless.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Callable, Collection
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

logger = logging.getLogger(__name__)

ChangeEventType = Literal["INSERT", "UPDATE", "DELETE"]
ALL_EVENTS: frozenset[ChangeEventType] = frozenset({"INSERT", "UPDATE", "DELETE"})
ANY_TABLE = "*"

ChangeCallback = Callable[["ChangeEvent"], None]


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    table: str
    event: ChangeEventType
    row_id: str | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_payload(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "event": self.event,
            "row_id": self.row_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


class Subscription:
    def __init__(
        self,
        feed: ChangeFeed,
        table: str,
        events: frozenset[ChangeEventType],
        callback: ChangeCallback,
    ) -> None:
        self._feed = feed
        self.table = table
        self.events = events
        self.callback = callback
        self.closed = False

    def matches(self, event: ChangeEvent) -> bool:
        if self.closed or event.event not in self.events:
            return False
        return self.table == ANY_TABLE or self.table == event.table

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed._remove(self)


class ChangeFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        events: Collection[ChangeEventType] = ALL_EVENTS,
    ) -> Subscription:
        unknown = set(events) - ALL_EVENTS
        if unknown:
            raise ValueError(f"Unknown change events: {sorted(unknown)}")
        subscription = Subscription(self, table, frozenset(events), callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every matching subscriber; returns how many were notified."""
        with self._lock:
            targets = [sub for sub in self._subscriptions if sub.matches(event)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.callback(event)
                delivered += 1
            except Exception:
                logger.exception(
                    "Change subscriber failed for %s %s", event.table, event.event
                )
        logger.debug("Published %s on %s to %d subscribers", event.event, event.table, delivered)
        return delivered

    def notify(self, table: str, event: ChangeEventType, row_id: Any = None) -> int:
        return self.publish(
            ChangeEvent(table=table, event=event, row_id=None if row_id is None else str(row_id))
        )

    async def stream(
        self,
        table: str = ANY_TABLE,
        events: Collection[ChangeEventType] = ALL_EVENTS,
        heartbeat_seconds: float | None = None,
    ) -> AsyncIterator[ChangeEvent | None]:
        """Yield matching events as they arrive; yields None when a heartbeat is due."""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()

        def _enqueue(event: ChangeEvent) -> None:
            loop.call_soon_threadsafe(queue.put_nowait, event)

        subscription = self.subscribe(table, _enqueue, events)
        try:
            while True:
                try:
                    yield await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
                except TimeoutError:
                    yield None
        finally:
            subscription.close()


_change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    return _change_feed

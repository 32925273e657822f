# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
In-process fan-out of broadcast messages to WebSocket sessions.

One publisher side (the media monitor thread, or any coroutine) and one
bounded queue per subscriber.  ``publish()`` never blocks: each message is
handed to the subscriber's event loop with ``call_soon_threadsafe`` and
appended to its queue there.  A subscriber that stops draining loses its
oldest messages; nobody else notices.
"""

import asyncio
import itertools
import json
import logging
import threading

log = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class Subscription:
    """One subscriber's mailbox.  Create via ``BroadcastHub.subscribe()``."""

    _ids = itertools.count(1)

    def __init__(self, loop: asyncio.AbstractEventLoop, maxsize: int):
        self.id = next(self._ids)
        self.loop = loop
        self.queue: asyncio.Queue[str] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def _deliver(self, message: str):
        # Runs on self.loop
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
            if self.dropped == 1 or self.dropped % 100 == 0:
                log.warning("Subscriber %d is lagging, %d message(s) dropped",
                            self.id, self.dropped)
        self.queue.put_nowait(message)

    async def get(self) -> str:
        return await self.queue.get()


class BroadcastHub:
    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self.queue_size = queue_size
        self._lock = threading.Lock()
        self._subscribers: dict[int, Subscription] = {}

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        """Register a subscriber on the running event loop.

        It receives every message published after this call returns.
        """
        sub = Subscription(asyncio.get_running_loop(), self.queue_size)
        with self._lock:
            self._subscribers[sub.id] = sub
        log.debug("Subscriber %d added (%d total)", sub.id, self.subscriber_count)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subscribers.pop(sub.id, None)
        log.debug("Subscriber %d removed", sub.id)

    def publish(self, message: str) -> int:
        """Queue *message* for every current subscriber. Thread-safe, non-blocking.

        Returns the number of subscribers it was handed to.
        """
        with self._lock:
            targets = list(self._subscribers.values())
        if not targets:
            return 0

        delivered = 0
        for sub in targets:
            try:
                sub.loop.call_soon_threadsafe(sub._deliver, message)
                delivered += 1
            except RuntimeError:
                # subscriber's loop is closed
                self.unsubscribe(sub)
        return delivered

    def publish_event(self, event_type: str, data=None) -> int:
        """Encode a ``{type, data}`` envelope and publish it."""
        message = {"type": event_type}
        if data is not None:
            message["data"] = data
        return self.publish(json.dumps(message))

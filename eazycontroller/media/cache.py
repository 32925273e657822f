# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Last-known-good media snapshot with single-flight refresh.

Readers never wait on the provider: ``read()`` hands back whatever snapshot
is stored, even if it is stale.  At most one refresh runs at a time —
``try_begin_refresh()`` is the gate and only the caller that wins it may
(and must) call ``complete_refresh()``.
"""

import threading
import time

from ..models import EMPTY_SNAPSHOT, MediaInfo, MediaSnapshot


class SessionCache:
    """Thread-safe snapshot holder shared by the monitor and the dispatcher."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: MediaSnapshot = EMPTY_SNAPSHOT
        self._updated_at: float | None = None
        self._refreshing = False
        self._generation = 0           # bumped by invalidate()
        self._refresh_generation = 0   # generation seen when the refresh began

    def read(self) -> MediaSnapshot:
        with self._lock:
            return self._snapshot

    def is_stale(self, max_age: float) -> bool:
        """True if nothing was ever stored or the snapshot is older than *max_age* seconds."""
        with self._lock:
            if self._updated_at is None:
                return True
            return self._clock() - self._updated_at > max_age

    def try_begin_refresh(self) -> bool:
        """Flip "idle" → "refreshing" in one step. False if already refreshing."""
        with self._lock:
            if self._refreshing:
                return False
            self._refreshing = True
            self._refresh_generation = self._generation
            return True

    def complete_refresh(self, snapshot) -> None:
        """Store *snapshot*, stamp it, and reopen the refresh gate.

        If ``invalidate()`` ran while the refresh was in flight the data may
        predate a control action, so it is stored but left stale.
        """
        snapshot = tuple(snapshot)
        with self._lock:
            self._snapshot = snapshot
            if self._generation == self._refresh_generation:
                self._updated_at = self._clock()
            else:
                self._updated_at = None
            self._refreshing = False

    def invalidate(self) -> None:
        """Mark the snapshot stale so the next reader triggers a refresh."""
        with self._lock:
            self._generation += 1
            self._updated_at = None

    @property
    def refreshing(self) -> bool:
        with self._lock:
            return self._refreshing

    def find(self, session_id: str) -> MediaInfo | None:
        for info in self.read():
            if info.session_id == session_id:
                return info
        return None

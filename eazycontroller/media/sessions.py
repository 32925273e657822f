# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Media session operations fronted by the SessionCache.

Reads are served from the cache and kick off a background refresh when the
snapshot is older than ``max_age``.  Control actions (play/pause, skip) go
straight to the provider on the worker pool and invalidate the cache so the
next poll picks up the new state.

Callable from the monitor thread and from the event loop alike; only the
``*_async`` helpers need a running loop.
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor, Future

from ..errors import ProviderError, UnsupportedPlatformError
from ..lib.artwork import encode_thumbnail
from ..models import MediaInfo, MediaSnapshot
from ..providers.base import StateProvider
from .cache import SessionCache

log = logging.getLogger(__name__)

CACHE_MAX_AGE = 0.5  # seconds


class MediaSessions:
    def __init__(self, provider: StateProvider, cache: SessionCache,
                 executor: Executor, max_age: float = CACHE_MAX_AGE):
        self.provider = provider
        self.cache = cache
        self.executor = executor
        self.max_age = max_age
        self._refresh_error: str | None = None

    # ── Snapshot ──

    def get_all_sessions(self) -> MediaSnapshot:
        """Return the cached snapshot, scheduling a refresh if it is stale.

        Never blocks on the provider.  The first call after startup returns an
        empty snapshot while the initial refresh runs in the background.
        """
        if not self.provider.supports_media:
            raise UnsupportedPlatformError(
                f"Media control is not supported by the '{self.provider.name}' provider")

        if not self.cache.is_stale(self.max_age):
            return self.cache.read()
        if not self.cache.try_begin_refresh():
            return self.cache.read()

        try:
            self.executor.submit(self.refresh_now)
        except RuntimeError:
            # executor shut down; reopen the gate
            self.cache.complete_refresh(self.cache.read())
            raise
        return self.cache.read()

    def refresh_now(self) -> MediaSnapshot:
        """Fetch from the provider and store the result.

        Only call after winning ``cache.try_begin_refresh()``.  On failure the
        previous snapshot is kept, so a transient OS error is "no change".
        """
        snapshot = None
        try:
            snapshot = tuple(self.provider.list_media_sessions())
            self._refresh_error = None
        except Exception as e:
            if str(e) != self._refresh_error:
                log.warning("Media session refresh failed: %s", e)
                self._refresh_error = str(e)
            else:
                log.debug("Media session refresh failed again: %s", e)
        finally:
            if snapshot is None:
                snapshot = self.cache.read()
            self.cache.complete_refresh(snapshot)
        return snapshot

    def get_media_info(self) -> MediaInfo | None:
        """The leading session, or None if nothing is playing anywhere."""
        sessions = self.get_all_sessions()
        return sessions[0] if sessions else None

    # ── Thumbnails ──

    def get_thumbnail(self, session_id: str | None = None) -> str | None:
        """Blocking: fetch and encode artwork for *session_id*."""
        raw = self.provider.get_thumbnail(session_id)
        return encode_thumbnail(raw)

    async def get_thumbnail_async(self, session_id: str | None = None) -> str | None:
        return await self._run(self.get_thumbnail, session_id)

    # ── Transport controls (bypass the cache) ──

    def _control(self, action: str, session_id: str | None):
        getattr(self.provider, action)(session_id)
        self.cache.invalidate()

    async def play_pause(self, session_id: str | None = None) -> None:
        await self._run(self._control, "play_pause", session_id)

    async def next_track(self, session_id: str | None = None) -> None:
        await self._run(self._control, "next_track", session_id)

    async def previous_track(self, session_id: str | None = None) -> None:
        await self._run(self._control, "previous_track", session_id)

    def submit(self, func, *args) -> Future:
        """Run *func* detached on the worker pool (fire-and-forget)."""
        return self.executor.submit(func, *args)

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, functools.partial(func, *args))
        except ProviderError:
            raise
        except Exception as e:
            log.warning("Media %s failed: %s", getattr(func, "__name__", func), e)
            raise ProviderError(str(e)) from e

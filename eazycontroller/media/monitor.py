# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Media monitor — polls the session cache and broadcasts what changed.

Runs on its own daemon thread for the life of the process, sleeping
``interval`` seconds between iterations.  Each iteration reads the
snapshot (which also drives cache refreshes), compares it structurally with
the previous one and, only on change, publishes:

  media_info_updated       one per session in the new snapshot
  media_info_cleared       once, when the last session disappears
  media_thumbnail_updated  later, if the leading session is a browser

An iteration that fails is logged and treated as "no change".  The loop
itself never exits.
"""

import logging
import threading
import time
from collections.abc import Callable

from ..hub import BroadcastHub
from ..models import EMPTY_SNAPSHOT, MediaInfo, MediaSnapshot
from .sessions import MediaSessions

log = logging.getLogger(__name__)

POLL_INTERVAL = 0.5  # seconds between change checks

# App identities whose sessions don't push artwork along with the metadata
BROWSER_APPS = ("chrome", "edge", "firefox", "opera", "brave")

Observer = Callable[[str, MediaInfo | str | None], None]


def is_browser(app_name: str, browser_apps=BROWSER_APPS) -> bool:
    name = app_name.lower()
    return any(browser in name for browser in browser_apps)


class MediaMonitor:
    def __init__(self, sessions: MediaSessions, hub: BroadcastHub,
                 interval: float = POLL_INTERVAL, browser_apps=BROWSER_APPS):
        self.sessions = sessions
        self.hub = hub
        self.interval = interval
        self.browser_apps = tuple(b.lower() for b in browser_apps)
        self._previous: MediaSnapshot = EMPTY_SNAPSHOT
        self._observers: list[Observer] = []
        self._thread: threading.Thread | None = None
        self._last_error: str | None = None

    # ── Local observers (in-process UI shells, tests) ──

    def add_observer(self, callback: Observer):
        """Register ``callback(event_name, payload)`` for change notifications."""
        self._observers.append(callback)

    def _notify(self, event: str, payload=None):
        for callback in list(self._observers):
            try:
                callback(event, payload)
            except Exception:
                log.exception("Media observer %r failed on %s", callback, event)

    # ── Thread lifecycle ──

    def start(self) -> threading.Thread:
        if self._thread and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(
            target=self.run_forever, name="media-monitor", daemon=True)
        self._thread.start()
        log.info("Media monitor started (interval %.2fs)", self.interval)
        return self._thread

    def is_alive(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def run_forever(self):
        while True:
            time.sleep(self.interval)
            try:
                self.run_once()
            except Exception:
                log.exception("Unexpected error in media monitor")

    # ── One poll ──

    def run_once(self) -> bool:
        """Poll once. Returns True if a change was published."""
        try:
            current = tuple(self.sessions.get_all_sessions())
        except Exception as e:
            self._log_poll_error(e)
            return False
        if self._last_error is not None:
            log.info("Media monitor recovered")
            self._last_error = None

        if current == self._previous:
            return False

        previous, self._previous = self._previous, current

        if current:
            for info in current:
                data = info.to_dict()
                self.hub.publish_event("media_info_updated", data)
                self._notify("media-info-updated", info)
            log.debug("Media changed: %d session(s)", len(current))
            self._maybe_fetch_thumbnail(current[0])
        elif previous:
            self.hub.publish_event("media_info_cleared")
            self._notify("media-info-cleared", None)
            log.info("All media sessions ended")
        return True

    def _log_poll_error(self, e: Exception):
        message = str(e)
        if message != self._last_error:
            log.warning("Media monitor error: %s", message)
            self._last_error = message
        else:
            log.debug("Media monitor error (repeated): %s", message)

    # ── Browser artwork ──

    def _maybe_fetch_thumbnail(self, leading: MediaInfo):
        if not is_browser(leading.app_name, self.browser_apps):
            return
        try:
            self.sessions.submit(self._fetch_thumbnail, leading.session_id)
        except RuntimeError as e:
            log.debug("Thumbnail fetch not scheduled: %s", e)

    def _fetch_thumbnail(self, session_id: str):
        """Detached: failures are logged and dropped."""
        try:
            thumbnail = self.sessions.get_thumbnail(session_id)
        except Exception as e:
            log.debug("Thumbnail fetch for %s failed: %s", session_id, e)
            return
        if not thumbnail:
            return
        self.hub.publish_event("media_thumbnail_updated", thumbnail)
        self._notify("media-thumbnail-updated", thumbnail)

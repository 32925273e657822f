from __future__ import annotations

import pytest

from eazycontroller.media.monitor import MediaMonitor, is_browser
from eazycontroller.models import MediaInfo
from tests.conftest import wait_until

SPOTIFY = MediaInfo("Spotify.exe_0", "Spotify.exe", title="Teardrop", is_playing=True)
CHROME = MediaInfo("Chrome_0", "Chrome", title="Lo-fi beats", is_playing=True)


class FakeSessions:
    def __init__(self) -> None:
        self.snapshot: tuple = ()
        self.error: Exception | None = None
        self.thumbnail: str | None = "aGVsbG8="
        self.thumbnail_error: Exception | None = None
        self.submitted: list = []

    def get_all_sessions(self):
        if self.error:
            raise self.error
        return self.snapshot

    def get_thumbnail(self, session_id):
        if self.thumbnail_error:
            raise self.thumbnail_error
        return self.thumbnail

    def submit(self, func, *args):
        self.submitted.append(args)
        func(*args)


class FakeHub:
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def publish_event(self, event_type, data=None):
        self.events.append((event_type, data))
        return 1


@pytest.fixture
def sessions() -> FakeSessions:
    return FakeSessions()


@pytest.fixture
def hub() -> FakeHub:
    return FakeHub()


@pytest.fixture
def monitor(sessions, hub) -> MediaMonitor:
    return MediaMonitor(sessions, hub, interval=0.01)


def test_no_event_at_startup_when_nothing_plays(monitor, hub) -> None:
    assert monitor.run_once() is False
    assert hub.events == []


def test_change_publishes_each_session(monitor, sessions, hub) -> None:
    sessions.snapshot = (SPOTIFY, CHROME)

    assert monitor.run_once() is True

    types = [e[0] for e in hub.events]
    assert types == ["media_info_updated", "media_info_updated"]
    assert hub.events[0][1] == SPOTIFY.to_dict()
    assert hub.events[1][1] == CHROME.to_dict()


def test_unchanged_snapshot_is_silent(monitor, sessions, hub) -> None:
    sessions.snapshot = (SPOTIFY,)
    monitor.run_once()
    hub.events.clear()

    sessions.snapshot = (MediaInfo("Spotify.exe_0", "Spotify.exe", title="Teardrop", is_playing=True),)

    assert monitor.run_once() is False
    assert hub.events == []


def test_cleared_is_sent_once(monitor, sessions, hub) -> None:
    sessions.snapshot = (SPOTIFY,)
    monitor.run_once()
    hub.events.clear()

    sessions.snapshot = ()
    monitor.run_once()
    monitor.run_once()

    assert hub.events == [("media_info_cleared", None)]


def test_error_is_no_change(monitor, sessions, hub) -> None:
    sessions.snapshot = (SPOTIFY,)
    monitor.run_once()
    hub.events.clear()

    sessions.error = OSError("busy")
    assert monitor.run_once() is False
    sessions.error = None

    assert monitor.run_once() is False
    assert hub.events == []


def test_repeated_errors_log_once_at_warning(monitor, sessions, caplog) -> None:
    sessions.error = OSError("busy")

    with caplog.at_level("DEBUG", logger="eazycontroller.media.monitor"):
        monitor.run_once()
        monitor.run_once()

    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert len(warnings) == 1


def test_browser_session_gets_thumbnail_push(monitor, sessions, hub) -> None:
    sessions.snapshot = (CHROME,)

    monitor.run_once()

    assert sessions.submitted == [("Chrome_0",)]
    assert hub.events[-1] == ("media_thumbnail_updated", "aGVsbG8=")


def test_non_browser_session_skips_thumbnail(monitor, sessions, hub) -> None:
    sessions.snapshot = (SPOTIFY, CHROME)

    monitor.run_once()

    assert sessions.submitted == []
    assert all(e[0] != "media_thumbnail_updated" for e in hub.events)


def test_thumbnail_failure_is_dropped(monitor, sessions, hub) -> None:
    sessions.snapshot = (CHROME,)
    sessions.thumbnail_error = OSError("no artwork")

    assert monitor.run_once() is True
    assert [e[0] for e in hub.events] == ["media_info_updated"]


def test_observers_receive_events_and_failures_are_contained(monitor, sessions) -> None:
    seen = []

    def broken(event, payload):
        raise ValueError("observer bug")

    monitor.add_observer(broken)
    monitor.add_observer(lambda event, payload: seen.append((event, payload)))

    sessions.snapshot = (SPOTIFY,)
    monitor.run_once()
    sessions.snapshot = ()
    monitor.run_once()

    assert seen == [("media-info-updated", SPOTIFY), ("media-info-cleared", None)]


def test_thread_runs_until_process_exit(monitor, sessions, hub) -> None:
    sessions.snapshot = (SPOTIFY,)
    monitor.start()

    assert monitor.is_alive()
    assert wait_until(lambda: hub.events)
    assert monitor.start() is monitor._thread


@pytest.mark.parametrize("app, expected", [
    ("Chrome", True),
    ("msedge.exe", True),
    ("Firefox", True),
    ("Spotify.exe", False),
])
def test_is_browser(app, expected) -> None:
    assert is_browser(app) is expected

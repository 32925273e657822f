from __future__ import annotations

import base64

import pytest

from eazycontroller.errors import ProviderError, SessionNotFoundError, UnsupportedPlatformError
from eazycontroller.media.cache import SessionCache
from eazycontroller.media.sessions import MediaSessions
from eazycontroller.providers import DemoProvider, UnsupportedProvider
from tests.conftest import prime, wait_until


class FailingProvider(DemoProvider):
    def __init__(self) -> None:
        super().__init__(track_seconds=0)
        self.fail = False

    def list_media_sessions(self):
        if self.fail:
            raise OSError("transport manager unavailable")
        return super().list_media_sessions()


def test_first_read_is_empty_then_fills_in_background(executor) -> None:
    slow = DemoProvider(latency=0.2, track_seconds=0)
    media = MediaSessions(slow, SessionCache(), executor)

    assert media.get_all_sessions() == ()
    assert wait_until(lambda: len(media.cache.read()) == 2)
    assert [s.session_id for s in media.get_all_sessions()] == ["Spotify.exe_0", "Chrome_0"]


def test_fresh_snapshot_does_not_refresh(media) -> None:
    prime(media)

    media.get_all_sessions()

    assert not media.cache.refreshing


def test_failed_refresh_keeps_previous_snapshot(executor) -> None:
    provider = FailingProvider()
    media = MediaSessions(provider, SessionCache(), executor)
    before = prime(media)

    provider.fail = True
    after = prime(media)

    assert after == before
    assert not media.cache.refreshing


def test_unsupported_provider_raises(executor) -> None:
    media = MediaSessions(UnsupportedProvider("Plan9"), SessionCache(), executor)

    with pytest.raises(UnsupportedPlatformError):
        media.get_all_sessions()


def test_media_info_is_leading_session(media) -> None:
    prime(media)
    info = media.get_media_info()

    assert info.title == "Teardrop"
    assert info.is_playing


async def test_control_invalidates_cache(media) -> None:
    prime(media)

    await media.next_track("Spotify.exe_0")

    assert media.cache.is_stale(media.max_age)
    snapshot = prime(media)
    assert snapshot[0].title == "Angel"
    assert snapshot[0].can_go_previous


async def test_control_on_unknown_session_raises(media) -> None:
    with pytest.raises(SessionNotFoundError):
        await media.play_pause("nope_0")


async def test_unexpected_provider_errors_are_wrapped(executor) -> None:
    class Broken(DemoProvider):
        def play_pause(self, session_id=None):
            raise RuntimeError("COM apartment gone")

    media = MediaSessions(Broken(), SessionCache(), executor)

    with pytest.raises(ProviderError, match="COM apartment gone"):
        await media.play_pause()


async def test_thumbnail_is_base64_png(media) -> None:
    encoded = await media.get_thumbnail_async("Chrome_0")

    assert base64.b64decode(encoded).startswith(b"\x89PNG")

"""Shared fixtures.

Every test runs against an empty config (no search paths, no env
overrides) so a developer's local config.json never leaks in.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from eazycontroller.lib import config
from eazycontroller.media.cache import SessionCache
from eazycontroller.media.sessions import MediaSessions
from eazycontroller.providers import DemoProvider, ProviderBridge


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, "_SEARCH_PATHS", [])
    monkeypatch.setattr(config, "_config", None)
    for name in ("EAZY_CONFIG", "EAZY_PORT", "EAZY_LOG_LEVEL", "NOTIFY_SOCKET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def provider() -> DemoProvider:
    # track_seconds=0 freezes playback position so snapshots are stable
    return DemoProvider(track_seconds=0)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-provider")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def media(provider, executor) -> MediaSessions:
    return MediaSessions(provider, SessionCache(), executor, max_age=0.5)


@pytest.fixture
def bridge(provider, executor) -> ProviderBridge:
    return ProviderBridge(provider, executor)


def prime(media: MediaSessions):
    """Synchronously load the provider's sessions into the cache."""
    assert media.cache.try_begin_refresh()
    return media.refresh_now()


def wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()

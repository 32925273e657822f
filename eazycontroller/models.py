# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Value records exchanged between the state provider, the cache and clients.

Everything here is immutable.  A media snapshot is a plain tuple of
MediaInfo so two snapshots compare structurally with ``==``.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class MediaInfo:
    """One media transport session (a player app) on the host."""
    session_id: str
    app_name: str
    title: str = ""
    artist: str = ""
    album: str = ""
    is_playing: bool = False
    thumbnail: str | None = None     # base64, only filled on explicit request
    can_go_next: bool = True
    can_go_previous: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AudioSession:
    """A per-application mixer entry."""
    name: str
    volume: float
    is_muted: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AudioDevice:
    """An active audio output endpoint."""
    id: str
    name: str
    is_default: bool

    def to_dict(self) -> dict:
        return asdict(self)


MediaSnapshot = tuple[MediaInfo, ...]
EMPTY_SNAPSHOT: MediaSnapshot = ()


def make_session_id(app_id: str, ordinal: int) -> str:
    """Build the id for the *ordinal*-th session owned by *app_id*."""
    return f"{app_id}_{ordinal}"


def assign_session_ids(app_ids: Iterable[str]) -> list[str]:
    """Return a session id per app id, numbering repeats of the same app.

    The ordinal counts sessions of the same application only, so reordering
    between different apps never changes an existing id:

        ["spotify", "chrome", "chrome"] -> ["spotify_0", "chrome_0", "chrome_1"]
    """
    seen: dict[str, int] = {}
    ids = []
    for app_id in app_ids:
        ordinal = seen.get(app_id, 0)
        seen[app_id] = ordinal + 1
        ids.append(make_session_id(app_id, ordinal))
    return ids


def clamp_volume(value: float) -> float:
    return max(0.0, min(1.0, float(value)))

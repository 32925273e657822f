# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Demo provider — a simulated host with a mixer, outputs and a few players.

Lets the whole service run end-to-end on machines without OS bindings and
gives the tests a realistic collaborator.  All state lives in memory behind
one lock; calls may be made from any worker thread.

Tracks advance on their own while a session is playing, so the monitor sees
real changes without any client interaction.
"""

import hashlib
import logging
import threading
import time
from io import BytesIO

from PIL import Image

from ..errors import DeviceNotFoundError, SessionNotFoundError
from ..models import (
    AudioDevice,
    AudioSession,
    MediaInfo,
    assign_session_ids,
    clamp_volume,
)
from .base import StateProvider

log = logging.getLogger(__name__)

DEFAULT_MIXER = [
    # name, volume, muted; repeated names are multi-process apps
    ("Spotify.exe", 0.8, False),
    ("chrome.exe", 0.6, False),
    ("chrome.exe", 0.6, False),
    ("Discord.exe", 1.0, True),
]

DEFAULT_DEVICES = [
    ("{0.0.0.00000000}.{speakers}", "Speakers (Realtek High Definition Audio)"),
    ("{0.0.0.00000000}.{headset}", "Headset (USB Audio)"),
    ("{0.0.0.00000000}.{hdmi}", "LG TV (NVIDIA High Definition Audio)"),
]

DEFAULT_PLAYERS = [
    {
        "app_id": "Spotify.exe",
        "playing": True,
        "tracks": [
            ("Teardrop", "Massive Attack", "Mezzanine"),
            ("Angel", "Massive Attack", "Mezzanine"),
            ("Inertia Creeps", "Massive Attack", "Mezzanine"),
        ],
    },
    {
        "app_id": "Chrome",
        "playing": False,
        "tracks": [
            ("Lo-fi beats to relax to", "Lofi Girl", ""),
        ],
    },
]


class _Player:
    def __init__(self, app_id: str, tracks: list[tuple], playing: bool, track_seconds: float):
        self.app_id = app_id
        self.tracks = tracks
        self.index = 0
        self.playing = playing
        self.track_seconds = track_seconds
        self._started = time.monotonic()
        self._elapsed = 0.0     # accumulated while paused

    @property
    def can_go_next(self) -> bool:
        return self.index < len(self.tracks) - 1

    @property
    def can_go_previous(self) -> bool:
        return self.index > 0

    def position(self) -> float:
        if self.playing:
            return self._elapsed + time.monotonic() - self._started
        return self._elapsed

    def advance(self):
        """Move to the next track once the current one has played out."""
        if not self.playing or self.track_seconds <= 0:
            return
        while self.position() >= self.track_seconds:
            if not self.can_go_next:
                self.playing = False
                self._elapsed = 0.0
                return
            leftover = self.position() - self.track_seconds
            self.index += 1
            self._elapsed = leftover
            self._started = time.monotonic()

    def toggle(self):
        if self.playing:
            self._elapsed = self.position()
            self.playing = False
        else:
            self._started = time.monotonic()
            self.playing = True

    def jump(self, delta: int):
        self.index = max(0, min(len(self.tracks) - 1, self.index + delta))
        self._elapsed = 0.0
        self._started = time.monotonic()


class DemoProvider(StateProvider):
    name = "demo"

    def __init__(self, latency: float = 0.0, track_seconds: float = 180.0,
                 mixer=None, devices=None, players=None):
        self.latency = latency
        self._lock = threading.Lock()
        self._mixer = [list(entry) for entry in (mixer or DEFAULT_MIXER)]
        self._devices = [tuple(d) for d in (devices or DEFAULT_DEVICES)]
        self._default_device = self._devices[0][0] if self._devices else None
        # device id -> [volume, muted]
        self._device_levels = {d[0]: [0.5, False] for d in self._devices}
        self._players = [
            _Player(p["app_id"], list(p["tracks"]), p.get("playing", False), track_seconds)
            for p in (players if players is not None else DEFAULT_PLAYERS)
        ]

    def _wait(self):
        if self.latency > 0:
            time.sleep(self.latency)

    # -- Audio mixer sessions --

    def list_audio_sessions(self) -> list[AudioSession]:
        self._wait()
        with self._lock:
            sessions: dict[str, AudioSession] = {}
            for name, volume, muted in self._mixer:
                sessions.setdefault(name, AudioSession(name, volume, muted))
            return list(sessions.values())

    def _update_mixer(self, session_name: str, column: int, value):
        self._wait()
        with self._lock:
            found = False
            for entry in self._mixer:
                if entry[0] == session_name:
                    entry[column] = value
                    found = True
            if not found:
                raise SessionNotFoundError(session_name)

    def set_session_volume(self, session_name: str, volume: float) -> None:
        self._update_mixer(session_name, 1, clamp_volume(volume))
        log.info("Session %s volume -> %.2f", session_name, volume)

    def set_session_mute(self, session_name: str, mute: bool) -> None:
        self._update_mixer(session_name, 2, bool(mute))
        log.info("Session %s mute -> %s", session_name, mute)

    # -- Output devices --

    def list_audio_devices(self) -> list[AudioDevice]:
        self._wait()
        with self._lock:
            return [AudioDevice(dev_id, name, dev_id == self._default_device)
                    for dev_id, name in self._devices]

    def set_default_device(self, device_id: str) -> None:
        self._wait()
        with self._lock:
            if device_id not in self._device_levels:
                raise DeviceNotFoundError(device_id)
            self._default_device = device_id
        log.info("Default output -> %s", device_id)

    def _default_levels(self) -> list:
        if self._default_device is None:
            raise DeviceNotFoundError("default")
        return self._device_levels[self._default_device]

    def get_default_device_volume(self) -> float:
        self._wait()
        with self._lock:
            return self._default_levels()[0]

    def set_default_device_volume(self, volume: float) -> None:
        self._wait()
        with self._lock:
            self._default_levels()[0] = clamp_volume(volume)

    def get_default_device_mute(self) -> bool:
        self._wait()
        with self._lock:
            return self._default_levels()[1]

    def set_default_device_mute(self, mute: bool) -> None:
        self._wait()
        with self._lock:
            self._default_levels()[1] = bool(mute)

    # -- Media transport sessions --

    def _snapshot(self) -> list[MediaInfo]:
        ids = assign_session_ids(p.app_id for p in self._players)
        infos = []
        for session_id, player in zip(ids, self._players):
            player.advance()
            title, artist, album = player.tracks[player.index]
            infos.append(MediaInfo(
                session_id=session_id,
                app_name=player.app_id,
                title=title,
                artist=artist,
                album=album,
                is_playing=player.playing,
                can_go_next=player.can_go_next,
                can_go_previous=player.can_go_previous,
            ))
        return infos

    def _resolve(self, session_id: str | None) -> _Player:
        """Find the player for *session_id*, or the current one if None."""
        if not self._players:
            raise SessionNotFoundError(session_id or "current")
        if session_id is None:
            for player in self._players:
                if player.playing:
                    return player
            return self._players[0]
        ids = assign_session_ids(p.app_id for p in self._players)
        for candidate, player in zip(ids, self._players):
            if candidate == session_id:
                return player
        raise SessionNotFoundError(session_id)

    def list_media_sessions(self) -> list[MediaInfo]:
        self._wait()
        with self._lock:
            return self._snapshot()

    def get_thumbnail(self, session_id: str | None = None) -> bytes | None:
        self._wait()
        with self._lock:
            player = self._resolve(session_id)
            title, artist, album = player.tracks[player.index]
        return _render_cover(f"{artist}/{album}/{title}")

    def play_pause(self, session_id: str | None = None) -> None:
        self._wait()
        with self._lock:
            player = self._resolve(session_id)
            player.toggle()
            log.info("%s -> %s", player.app_id, "playing" if player.playing else "paused")

    def next_track(self, session_id: str | None = None) -> None:
        self._wait()
        with self._lock:
            player = self._resolve(session_id)
            if player.can_go_next:
                player.jump(1)

    def previous_track(self, session_id: str | None = None) -> None:
        self._wait()
        with self._lock:
            player = self._resolve(session_id)
            if player.can_go_previous:
                player.jump(-1)


def _render_cover(key: str, size: int = 64) -> bytes:
    """Generate a flat-colour PNG cover derived from *key*."""
    digest = hashlib.sha1(key.encode("utf-8")).digest()
    image = Image.new("RGB", (size, size), tuple(digest[:3]))
    buf = BytesIO()
    image.save(buf, "PNG")
    return buf.getvalue()

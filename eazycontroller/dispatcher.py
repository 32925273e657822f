# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Client message dispatcher.

Every text frame a client sends is a JSON object ``{"type": ..., "data": ...}``.
``handle_message`` maps it to a provider or media call and returns the reply
envelope for that client, or None when there is nothing to answer (malformed
requests are dropped silently, as the UI never sends them).

  {"type": "set_session_volume", "data": {"session_name": "spotify.exe", "volume": 0.4}}
  → {"type": "success", "message": "Volume set"}

  {"type": "get_default_device_volume"}
  → {"type": "default_device_volume", "data": 0.5}
"""

import json
import logging
import math

from .errors import ProtocolError, ProviderError
from .media.sessions import MediaSessions
from .models import clamp_volume
from .providers.bridge import ProviderBridge

log = logging.getLogger(__name__)

COMMAND_TYPES = (
    "get_audio_sessions", "set_session_volume", "set_session_mute",
    "get_audio_devices", "set_default_device",
    "get_default_device_volume", "set_default_device_volume",
    "get_default_device_mute", "set_default_device_mute",
    "get_all_media_sessions", "get_media_info", "get_media_thumbnail",
    "media_play_pause", "media_next", "media_previous",
)

# Broadcast-only types, never valid as a request
EVENT_TYPES = ("media_info_updated", "media_thumbnail_updated", "media_info_cleared")


class _Malformed(Exception):
    """A required field is missing or has the wrong type."""


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def decode_message(text: str):
    """Parse one text frame. Raises ProtocolError if it is not strict JSON.

    ``NaN`` and ``Infinity`` are refused; the stdlib parser accepts them.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError) as e:
        raise ProtocolError(f"Invalid message: {e}") from e


# ── Field extraction ──
# bool is a subclass of int, so it is rejected explicitly for numbers.

def _field(data, key):
    if not isinstance(data, dict) or key not in data:
        raise _Malformed(key)
    return data[key]


def _str(data, key) -> str:
    value = _field(data, key)
    if not isinstance(value, str):
        raise _Malformed(key)
    return value


def _number(data, key) -> float:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _Malformed(key)
    try:
        number = float(value)
    except OverflowError:
        raise _Malformed(key) from None
    if not math.isfinite(number):
        raise _Malformed(key)
    return number


def _bool(data, key) -> bool:
    value = _field(data, key)
    if not isinstance(value, bool):
        raise _Malformed(key)
    return value


def _optional_session(data) -> str | None:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise _Malformed("data")
    value = data.get("session_id")
    if value is not None and not isinstance(value, str):
        raise _Malformed("session_id")
    return value


def _success(message: str) -> dict:
    return {"type": "success", "message": message}


def _reply(reply_type: str, data) -> dict:
    return {"type": reply_type, "data": data}


class MessageDispatcher:
    def __init__(self, bridge: ProviderBridge, media: MediaSessions):
        self.bridge = bridge
        self.media = media
        self.handlers = {
            "get_audio_sessions": self._get_audio_sessions,
            "set_session_volume": self._set_session_volume,
            "set_session_mute": self._set_session_mute,
            "get_audio_devices": self._get_audio_devices,
            "set_default_device": self._set_default_device,
            "get_default_device_volume": self._get_default_device_volume,
            "set_default_device_volume": self._set_default_device_volume,
            "get_default_device_mute": self._get_default_device_mute,
            "set_default_device_mute": self._set_default_device_mute,
            "get_all_media_sessions": self._get_all_media_sessions,
            "get_media_info": self._get_media_info,
            "get_media_thumbnail": self._get_media_thumbnail,
            "media_play_pause": self._media_play_pause,
            "media_next": self._media_next,
            "media_previous": self._media_previous,
        }

    async def handle_message(self, msg) -> dict | None:
        if not isinstance(msg, dict):
            return None
        msg_type = msg.get("type")
        if not isinstance(msg_type, str):
            return None

        handler = self.handlers.get(msg_type)
        if handler is None:
            log.debug("Unknown message type: %s", msg_type)
            return {"type": "error", "message": f"Unknown message type: {msg_type}"}

        try:
            return await handler(msg.get("data"))
        except _Malformed as e:
            log.debug("Dropping %s: bad or missing field '%s'", msg_type, e)
            return None
        except ProviderError as e:
            log.debug("%s failed: %s", msg_type, e)
            return {"type": "error", "message": str(e)}

    # ── Mixer ──

    async def _get_audio_sessions(self, data):
        sessions = await self.bridge.list_audio_sessions()
        return _reply("audio_sessions", [s.to_dict() for s in sessions])

    async def _set_session_volume(self, data):
        name = _str(data, "session_name")
        volume = clamp_volume(_number(data, "volume"))
        await self.bridge.set_session_volume(name, volume)
        return _success("Volume set")

    async def _set_session_mute(self, data):
        name = _str(data, "session_name")
        mute = _bool(data, "mute")
        await self.bridge.set_session_mute(name, mute)
        return _success("Mute set")

    # ── Devices ──

    async def _get_audio_devices(self, data):
        devices = await self.bridge.list_audio_devices()
        return _reply("audio_devices", [d.to_dict() for d in devices])

    async def _set_default_device(self, data):
        await self.bridge.set_default_device(_str(data, "device_id"))
        return _success("Default device set")

    async def _get_default_device_volume(self, data):
        return _reply("default_device_volume", await self.bridge.get_default_device_volume())

    async def _set_default_device_volume(self, data):
        volume = clamp_volume(_number(data, "volume"))
        await self.bridge.set_default_device_volume(volume)
        return _success("Default device volume set")

    async def _get_default_device_mute(self, data):
        return _reply("default_device_mute", await self.bridge.get_default_device_mute())

    async def _set_default_device_mute(self, data):
        await self.bridge.set_default_device_mute(_bool(data, "mute"))
        return _success("Default device mute set")

    # ── Media ──

    async def _get_all_media_sessions(self, data):
        sessions = self.media.get_all_sessions()
        return _reply("all_media_sessions", [s.to_dict() for s in sessions])

    async def _get_media_info(self, data):
        info = self.media.get_media_info()
        return _reply("media_info", info.to_dict() if info else None)

    async def _get_media_thumbnail(self, data):
        session_id = _optional_session(data)
        return _reply("media_thumbnail", await self.media.get_thumbnail_async(session_id))

    async def _media_play_pause(self, data):
        await self.media.play_pause(_optional_session(data))
        return _success("Play/pause toggled")

    async def _media_next(self, data):
        await self.media.next_track(_optional_session(data))
        return _success("Skipped to next track")

    async def _media_previous(self, data):
        await self.media.previous_track(_optional_session(data))
        return _success("Skipped to previous track")

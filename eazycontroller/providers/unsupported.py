# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Provider for hosts without OS bindings — every call fails cleanly."""

import platform

from ..errors import UnsupportedPlatformError
from .base import StateProvider


class UnsupportedProvider(StateProvider):
    name = "unsupported"
    supports_media = False

    def __init__(self, system: str | None = None):
        self.system = system or platform.system() or "this host"

    def _fail(self, *args, **kwargs):
        raise UnsupportedPlatformError(
            f"Audio and media control is not supported on {self.system}")

    list_audio_sessions = _fail
    set_session_volume = _fail
    set_session_mute = _fail
    list_audio_devices = _fail
    set_default_device = _fail
    get_default_device_volume = _fail
    set_default_device_volume = _fail
    get_default_device_mute = _fail
    set_default_device_mute = _fail
    list_media_sessions = _fail
    get_thumbnail = _fail
    play_pause = _fail
    next_track = _fail
    previous_track = _fail

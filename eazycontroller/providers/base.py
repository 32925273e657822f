# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Abstract base class for host state providers.

A provider is the only code that talks to the operating system: the audio
mixer, the output devices and the media transport sessions.  Every method
is synchronous and may block for as long as the OS takes — callers run them
on a worker pool (see ProviderBridge), never on the event loop.

Failures are raised as ProviderError subclasses.
"""

from abc import ABC, abstractmethod

from ..models import AudioDevice, AudioSession, MediaInfo


class StateProvider(ABC):
    """Interface every host backend must implement."""

    name: str = ""
    supports_media: bool = True

    # -- Audio mixer sessions --

    @abstractmethod
    def list_audio_sessions(self) -> list[AudioSession]: ...

    @abstractmethod
    def set_session_volume(self, session_name: str, volume: float) -> None: ...

    @abstractmethod
    def set_session_mute(self, session_name: str, mute: bool) -> None: ...

    # -- Output devices --

    @abstractmethod
    def list_audio_devices(self) -> list[AudioDevice]: ...

    @abstractmethod
    def set_default_device(self, device_id: str) -> None: ...

    @abstractmethod
    def get_default_device_volume(self) -> float: ...

    @abstractmethod
    def set_default_device_volume(self, volume: float) -> None: ...

    @abstractmethod
    def get_default_device_mute(self) -> bool: ...

    @abstractmethod
    def set_default_device_mute(self, mute: bool) -> None: ...

    # -- Media transport sessions --

    @abstractmethod
    def list_media_sessions(self) -> list[MediaInfo]: ...

    @abstractmethod
    def get_thumbnail(self, session_id: str | None = None) -> bytes | None:
        """Raw artwork bytes for *session_id* (or the current session)."""

    @abstractmethod
    def play_pause(self, session_id: str | None = None) -> None: ...

    @abstractmethod
    def next_track(self, session_id: str | None = None) -> None: ...

    @abstractmethod
    def previous_track(self, session_id: str | None = None) -> None: ...

    # -- Optional --

    def close(self) -> None:
        pass  # nothing to release by default

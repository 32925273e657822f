# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Async facade over a blocking StateProvider.

Every call is pushed onto a dedicated thread pool with
``loop.run_in_executor`` so a native call that hangs for seconds never
stalls the event loop serving other WebSocket clients.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor

from ..errors import ProviderError
from ..models import AudioDevice, AudioSession
from .base import StateProvider

log = logging.getLogger(__name__)


class ProviderBridge:
    """Runs provider calls on worker threads and awaits the result."""

    def __init__(self, provider: StateProvider, executor: ThreadPoolExecutor):
        self.provider = provider
        self.executor = executor

    async def call(self, method: str, *args):
        """Run ``provider.<method>(*args)`` on the worker pool.

        Anything the provider raises that is not already a ProviderError is
        wrapped in one, so callers only ever handle a single error type.
        """
        func = functools.partial(getattr(self.provider, method), *args)
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, func)
        except ProviderError:
            raise
        except Exception as e:
            log.warning("Provider %s.%s failed: %s", self.provider.name, method, e)
            raise ProviderError(f"{method} failed: {e}") from e

    # -- Audio mixer sessions --

    async def list_audio_sessions(self) -> list[AudioSession]:
        return await self.call("list_audio_sessions")

    async def set_session_volume(self, session_name: str, volume: float) -> None:
        await self.call("set_session_volume", session_name, volume)

    async def set_session_mute(self, session_name: str, mute: bool) -> None:
        await self.call("set_session_mute", session_name, mute)

    # -- Output devices --

    async def list_audio_devices(self) -> list[AudioDevice]:
        return await self.call("list_audio_devices")

    async def set_default_device(self, device_id: str) -> None:
        await self.call("set_default_device", device_id)

    async def get_default_device_volume(self) -> float:
        return await self.call("get_default_device_volume")

    async def set_default_device_volume(self, volume: float) -> None:
        await self.call("set_default_device_volume", volume)

    async def get_default_device_mute(self) -> bool:
        return await self.call("get_default_device_mute")

    async def set_default_device_mute(self, mute: bool) -> None:
        await self.call("set_default_device_mute", mute)

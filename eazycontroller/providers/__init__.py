"""
Pluggable host state providers.

A provider answers "what is playing, what is the mixer doing" and carries
out control actions.  The factory ``create_provider`` reads config.json and
returns the configured backend.

Supported types:
  - ``demo``         – simulated host, works anywhere (default)
  - ``unsupported``  – every call fails with UnsupportedPlatformError
"""

import logging

from ..lib.config import cfg
from .base import StateProvider
from .bridge import ProviderBridge
from .demo import DemoProvider
from .unsupported import UnsupportedProvider

logger = logging.getLogger(__name__)

__all__ = [
    "StateProvider",
    "ProviderBridge",
    "DemoProvider",
    "UnsupportedProvider",
    "create_provider",
]


def create_provider(provider_type: str | None = None) -> StateProvider:
    """Create the provider named by *provider_type* or config.json.

    Reads from config.json "provider" section:
      type           – "demo" or "unsupported" (default "demo")
      latency        – demo only: seconds every call blocks (default 0)
      track_seconds  – demo only: simulated track length (default 180)
    """
    ptype = str(provider_type or cfg("provider", "type", default="demo")).lower()

    if ptype == "unsupported":
        logger.info("State provider: unsupported (all audio/media calls fail)")
        return UnsupportedProvider()
    if ptype != "demo":
        logger.warning("Unknown provider type '%s' — falling back to demo", ptype)

    latency = float(cfg("provider", "latency", default=0))
    track_seconds = float(cfg("provider", "track_seconds", default=180))
    logger.info("State provider: demo (latency %.2fs, tracks %.0fs)", latency, track_seconds)
    return DemoProvider(latency=latency, track_seconds=track_seconds)

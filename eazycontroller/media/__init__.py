"""Media session snapshot, cache and change monitor."""

from .cache import SessionCache
from .monitor import MediaMonitor
from .sessions import MediaSessions

__all__ = ["SessionCache", "MediaMonitor", "MediaSessions"]

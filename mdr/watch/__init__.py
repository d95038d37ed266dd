"""
Watch mode: debounced filesystem events drive incremental rebuilds.
"""

from __future__ import annotations

from .handler import ChangeHandler
from .queue import DebouncedQueue
from .session import WatchSession, WatchState

__all__ = ["WatchSession", "WatchState", "DebouncedQueue", "ChangeHandler"]

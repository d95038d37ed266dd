"""
Debounced change queue.

Single producer (filesystem event callbacks) and single consumer (the watch
session). The producer only enqueues paths; all filtering and state changes
happen on the consumer side, inside `collect`.
"""

from __future__ import annotations

import queue
import time
from typing import Callable, List, Optional


class DebouncedQueue:
    def __init__(self, quiet_seconds: float):
        self.quiet_seconds = max(0.0, quiet_seconds)
        self._q: queue.Queue[str] = queue.Queue()

    def put(self, path: str) -> None:
        self._q.put(path)

    def pending(self) -> int:
        return self._q.qsize()

    def collect(self, accept: Callable[[str], bool], timeout: Optional[float] = None) -> List[str]:
        """
        Wait for the first accepted path, then coalesce.

        Every accepted path restarts the quiet period; rejected paths do not.
        There is no upper bound on the total wait.

        Args:
            accept: Called once per dequeued path
            timeout: Max wait for the first accepted path (None: forever)

        Returns:
            Accepted paths in arrival order; empty if the timeout expired first
        """
        batch: List[str] = []
        deadline = None if timeout is None else time.monotonic() + timeout
        while not batch:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                path = self._q.get(timeout=remaining)
            except queue.Empty:
                return batch
            if accept(path):
                batch.append(path)

        quiet_until = time.monotonic() + self.quiet_seconds
        while True:
            try:
                path = self._q.get(timeout=max(0.0, quiet_until - time.monotonic()))
            except queue.Empty:
                return batch
            if accept(path):
                batch.append(path)
                quiet_until = time.monotonic() + self.quiet_seconds


__all__ = ["DebouncedQueue"]

from __future__ import annotations

import os
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler


class ChangeHandler(FileSystemEventHandler):
    """
    Forwards file paths from watchdog events to the watch session.

    Runs on the observer thread: it must not touch session state, only call
    `submit`. Directory events are dropped; new directories are covered by
    the recursive watch.
    """

    def __init__(self, submit: Callable[[str], None]):
        super().__init__()
        self.submit = submit

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if event.event_type in ("opened", "closed_no_write"):
            return
        self.submit(os.fsdecode(event.src_path))
        dest = getattr(event, "dest_path", "")
        if dest:
            self.submit(os.fsdecode(dest))


__all__ = ["ChangeHandler"]

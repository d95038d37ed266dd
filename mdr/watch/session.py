"""
Watch session: keeps generated files in sync while templates change.

    IDLE --event--> ACCUMULATING --quiet period--> PROCESSING --> IDLE

Filesystem callbacks only enqueue paths (see ChangeHandler). Everything else
(pending changes, pending errors, the watch registry) belongs to the thread
calling `pump`, so no locking is needed.
"""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

from .handler import ChangeHandler
from .queue import DebouncedQueue
from ..build.builder import Builder, BuildReport
from ..build.deps import build_partial_dependency_map
from ..build.discovery import build_ignore_spec, is_excluded
from ..build.outputs import display_path, is_within
from ..config import Config, TEMPLATE_SUFFIX, is_output, is_partial, is_template

logger = logging.getLogger(__name__)


class WatchState(enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    PROCESSING = "processing"


class WatchSession:
    """
    One watch session. Independent sessions do not share any state.

    Args:
        cfg: Project configuration
        builder: Builder to render with (a default one is created)
        observer_factory: watchdog observer class or factory (replaceable in tests)
    """

    def __init__(
        self,
        cfg: Config,
        *,
        builder: Optional[Builder] = None,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ):
        self.cfg = cfg
        self.builder = builder or Builder(cfg)
        self.state = WatchState.IDLE
        self.pending_changes: Set[Path] = set()
        self.pending_errors: Set[Path] = set()
        self.passes = 0

        self._events = DebouncedQueue(cfg.debounce_seconds)
        self._ignore = build_ignore_spec(cfg.ignore)
        self._observer_factory = observer_factory
        self._observer: Optional[BaseObserver] = None
        self._watches: Dict[Path, ObservedWatch] = {}

    # ------------------------------ lifecycle ------------------------------ #

    def start(self) -> BuildReport:
        """Initial build, then start observing the templates and output roots."""
        logger.info("Watch mode started")
        report = self.initial_build()

        self._observer = self._observer_factory()
        handler = ChangeHandler(self.notify)
        self._watch(self.cfg.templates_dir, handler)
        if not is_within(self.cfg.output_dir, self.cfg.templates_dir):
            if self.cfg.output_dir.is_dir():
                self._watch(self.cfg.output_dir, handler)
            else:
                logger.warning(
                    "Output directory %s does not exist; creation of generated files will not be noticed",
                    self.cfg.output_dir,
                )
        self._observer.start()
        logger.info("Watching for changes... (press Ctrl+C to stop)")
        return report

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        self._watches.clear()

    def run_forever(self, poll_seconds: float = 1.0) -> None:
        self.start()
        try:
            while True:
                self.pump(timeout=poll_seconds)
        except KeyboardInterrupt:
            logger.info("Stopping file watcher...")
        finally:
            self.stop()

    @property
    def watched_roots(self) -> List[Path]:
        return list(self._watches)

    def _watch(self, root: Path, handler: ChangeHandler) -> None:
        if root in self._watches or self._observer is None:
            return
        self._watches[root] = self._observer.schedule(handler, str(root), recursive=True)

    # ------------------------------ build steps ----------------------------- #

    def initial_build(self) -> BuildReport:
        report = self.builder.build()
        self.pending_errors.update(r.template for r in report.errors)
        self._log_report(report)
        return report

    def notify(self, path: str) -> None:
        """Producer side; safe to call from any thread."""
        self._events.put(path)

    def qualifies(self, path: str) -> bool:
        p = Path(os.path.abspath(path))
        if is_output(path):
            return bool(self.pending_errors) and is_within(p, self.cfg.output_dir)
        if not path.endswith(TEMPLATE_SUFFIX):
            return False
        if is_within(p, self.cfg.output_dir):
            return False
        return not is_excluded(p, self.cfg, self._ignore)

    def _accept(self, path: str) -> bool:
        if not self.qualifies(path):
            return False
        self.state = WatchState.ACCUMULATING
        if path.endswith(TEMPLATE_SUFFIX):
            self.pending_changes.add(Path(os.path.abspath(path)))
        return True

    def pump(self, timeout: Optional[float] = None) -> Optional[BuildReport]:
        """
        Consumer side: wait for qualifying events, debounce, process once.

        Returns:
            Report of the processing pass, or None if no qualifying event
            arrived within `timeout`
        """
        batch = self._events.collect(self._accept, timeout=timeout)
        if not batch:
            return None
        return self.process_pending()

    def affected_templates(self, changes: Set[Path]) -> List[Path]:
        """Templates to re-render for a set of changed .mdoc paths (plus pending errors)."""
        affected: Dict[Path, None] = {}
        partials = sorted(p for p in changes if is_partial(p))
        for path in sorted(changes):
            # deleted templates are handled by orphan cleanup
            if is_template(path) and path.is_file():
                affected[path] = None

        if partials:
            dep_map = build_partial_dependency_map(self.builder.discover())
            for partial in partials:
                dependents = dep_map.get(partial.resolve(), set())
                if dependents:
                    logger.info(
                        "Partial changed: %s -> %d dependent file(s)",
                        display_path(self.cfg, partial),
                        len(dependents),
                    )
                for dep in sorted(dependents):
                    affected[dep] = None

        for template in sorted(self.pending_errors):
            affected[template] = None
        return list(affected)

    def process_pending(self) -> Optional[BuildReport]:
        self.pending_errors = {t for t in self.pending_errors if t.is_file()}
        if not self.pending_changes and not self.pending_errors:
            self.state = WatchState.IDLE
            return None

        self.state = WatchState.PROCESSING
        try:
            changes, self.pending_changes = self.pending_changes, set()
            templates = self.affected_templates(changes)

            report = BuildReport()
            for template in templates:
                result = self.builder.try_render_file(template)
                report.results.append(result)
                if result.ok:
                    self.pending_errors.discard(template)
                else:
                    self.pending_errors.add(template)

            report.deleted = self.builder.cleanup_orphans()
            self.passes += 1
            if templates:
                if self.pending_errors:
                    logger.error("%d file(s) pending (missing .g.md or render error)", len(self.pending_errors))
                else:
                    logger.info("All ok")
            return report
        finally:
            self.state = WatchState.IDLE

    @staticmethod
    def _log_report(report: BuildReport) -> None:
        if not report.results:
            return
        if report.ok:
            logger.info(report.summary())
        else:
            logger.error(report.summary())


__all__ = ["WatchSession", "WatchState"]

"""
Build orchestration for `render` and `push`.

Templates are processed sequentially in discovery order. One file failing
never stops the batch: failures are collected in the report and only show
up in the final exit status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .discovery import discover_templates
from .orphans import cleanup_orphans
from .outputs import display_path, output_path_for
from ..compiler import compile_file
from ..config import Config
from ..errors import MdrUserError, MissingOutputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileResult:
    template: Path
    output: Path
    created: bool = False
    unchanged: bool = False
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BuildReport:
    results: List[FileResult] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)

    @property
    def rendered(self) -> List[FileResult]:
        return [r for r in self.results if r.ok]

    @property
    def created(self) -> List[FileResult]:
        return [r for r in self.results if r.ok and r.created]

    @property
    def errors(self) -> List[FileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        rendered = len(self.rendered)
        if not self.ok:
            return f"Rendered {rendered} file(s), {len(self.errors)} error(s)"
        created = len(self.created)
        suffix = f", created {created} new" if created else ""
        return f"All ok - Rendered {rendered} file(s){suffix}"


class Builder:
    """
    Renders templates of one project into their generated files.

    Args:
        cfg: Project configuration
        compile_fn: Template path -> Markdown text (replaceable in tests)
    """

    def __init__(self, cfg: Config, *, compile_fn: Callable[[Path], str] = compile_file):
        self.cfg = cfg
        self.compile_fn = compile_fn

    def discover(self) -> List[Path]:
        return discover_templates(self.cfg)

    def output_path(self, template: Path) -> Path:
        return output_path_for(self.cfg, template)

    def render_file(self, template: Path, *, force: bool = False) -> FileResult:
        """
        Render one template.

        Safe mode (force=False) requires the generated file to exist already
        and leaves the filesystem untouched when it does not. Force mode
        creates missing directories and files.

        Raises:
            Any compile or I/O error; see try_render_file for the batch variant.
        """
        output = self.output_path(template)
        shown = display_path(self.cfg, template)
        shown_out = display_path(self.cfg, output)

        if not force and not output.is_file():
            err = MissingOutputError(output, shown_out)
            logger.error("Error: %s", err)
            return FileResult(template=template, output=output, error=err)

        markdown = self.compile_fn(template)

        created = not output.exists()
        if created:
            output.parent.mkdir(parents=True, exist_ok=True)
            unchanged = False
        else:
            unchanged = output.read_text(encoding="utf-8") == markdown
        if not unchanged:
            output.write_text(markdown, encoding="utf-8")

        if created:
            logger.info("Created: %s -> %s", shown, shown_out)
        else:
            logger.info("%s -> %s", shown, shown_out)
        return FileResult(template=template, output=output, created=created, unchanged=unchanged)

    def try_render_file(self, template: Path, *, force: bool = False) -> FileResult:
        """render_file with per-file error isolation."""
        try:
            return self.render_file(template, force=force)
        except MdrUserError as e:
            logger.error("Error rendering %s: %s", display_path(self.cfg, template), e)
            return FileResult(template=template, output=self.output_path(template), error=e)
        except Exception as e:
            logger.error("Error rendering %s: %s", display_path(self.cfg, template), e)
            logger.debug("Traceback for %s", template, exc_info=True)
            return FileResult(template=template, output=self.output_path(template), error=e)

    def cleanup_orphans(self) -> List[Path]:
        return cleanup_orphans(self.cfg)

    def build(self, templates: Optional[Iterable[Path]] = None, *, force: bool = False) -> BuildReport:
        """
        Orphan cleanup first, then every template in order.

        Args:
            templates: Explicit template list; discovered when omitted
            force: push semantics (create missing generated files)
        """
        report = BuildReport(deleted=self.cleanup_orphans())
        todo = self.discover() if templates is None else list(templates)
        if not todo:
            logger.info("No .mdoc files found")
        for template in todo:
            report.results.append(self.try_render_file(template, force=force))
        return report


def render(cfg: Config) -> BuildReport:
    """Safe render: generated files must already exist."""
    return Builder(cfg).build()


def push(cfg: Config) -> BuildReport:
    """Create or update every generated file."""
    return Builder(cfg).build(force=True)


__all__ = ["Builder", "BuildReport", "FileResult", "render", "push"]

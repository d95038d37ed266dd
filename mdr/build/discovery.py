"""
Template discovery.

Walks the templates root, pruning excluded directories early, and yields
renderable templates (*.mdoc but not *.p.mdoc).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

import pathspec
from pathspec.patterns import GitWildMatchPattern

from ..config import Config, is_template

EXCLUDED_DIRS = {"node_modules"}


def build_ignore_spec(entries: Iterable[str]) -> Optional[pathspec.PathSpec]:
    """
    PathSpec for the `ignore` config entries.

    Entries are literal paths relative to the templates root: `drafts`
    matches `drafts` itself and everything below it, but neither
    `docs/drafts` nor `drafts-old`. Glob characters in an entry are
    escaped, so a directory named `old[1]` is matched as written.
    Return None when nothing is ignored.
    """
    lines: List[str] = []
    for entry in entries:
        e = entry.strip().replace("\\", "/")
        if e.startswith("./"):
            e = e[2:]
        e = e.strip("/")
        if not e:
            continue
        lines.append("/" + GitWildMatchPattern.escape(e))
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_excluded_dir(name: str, cfg: Config) -> bool:
    return name.startswith(".") or name in EXCLUDED_DIRS or name == cfg.output_dir.name


def is_excluded(path: Path, cfg: Config, spec: Optional[pathspec.PathSpec]) -> bool:
    """
    Whether a path under the templates root is outside the template set
    (excluded directory on the way, or matched by `ignore`).
    Paths outside the templates root are always excluded.
    """
    try:
        rel = Path(os.path.abspath(path)).relative_to(cfg.templates_dir)
    except ValueError:
        return True
    if any(is_excluded_dir(part, cfg) for part in rel.parts[:-1]):
        return True
    return bool(spec and spec.match_file(rel.as_posix()))


def iter_templates(cfg: Config, spec: Optional[pathspec.PathSpec] = None) -> Iterable[Path]:
    """
    Recursive template iterator with early directory pruning.
    Yields files of a directory before its subdirectories; see
    discover_templates for the processing order.
    """
    root = cfg.templates_dir
    if spec is None:
        spec = build_ignore_spec(cfg.ignore)
    for dirpath, dirnames, filenames in os.walk(root):
        keep: List[str] = []
        for d in sorted(dirnames):
            if is_excluded_dir(d, cfg):
                continue
            rel_dir = Path(dirpath, d).relative_to(root).as_posix()
            if spec and spec.match_file(rel_dir):
                continue
            keep.append(d)
        # in-place, so os.walk does not descend into pruned directories
        dirnames[:] = keep

        for fn in sorted(filenames):
            if not is_template(fn):
                continue
            p = Path(dirpath, fn)
            if spec and spec.match_file(p.relative_to(root).as_posix()):
                continue
            yield p


def discover_templates(cfg: Config) -> List[Path]:
    """
    Templates in processing order: entries of each directory by name, files
    and subdirectories interleaved (`a/x.mdoc` before `b.mdoc`).
    """
    if not cfg.templates_dir.is_dir():
        return []
    root = cfg.templates_dir
    return sorted(iter_templates(cfg), key=lambda p: p.relative_to(root).parts)


__all__ = ["build_ignore_spec", "is_excluded", "is_excluded_dir", "iter_templates", "discover_templates"]

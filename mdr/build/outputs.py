"""
Template <-> generated file mapping.

    <templates>/guide/intro.mdoc  <->  <output>/guide/intro.g.md

The mapping is derived, never stored.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from ..config import Config, OUTPUT_SUFFIX, TEMPLATE_SUFFIX


def _swap_suffix(rel_posix: str, old: str, new: str) -> str:
    if not rel_posix.endswith(old):
        raise ValueError(f"Expected a '{old}' file, got: {rel_posix}")
    return rel_posix[: -len(old)] + new


def output_path_for(cfg: Config, template: Path) -> Path:
    rel = Path(os.path.abspath(template)).relative_to(cfg.templates_dir).as_posix()
    return cfg.output_dir / _swap_suffix(rel, TEMPLATE_SUFFIX, OUTPUT_SUFFIX)


def template_path_for(cfg: Config, output: Path) -> Path:
    rel = Path(os.path.abspath(output)).relative_to(cfg.output_dir).as_posix()
    return cfg.templates_dir / _swap_suffix(rel, OUTPUT_SUFFIX, TEMPLATE_SUFFIX)


def is_within(path: Path, root: Path) -> bool:
    p = Path(os.path.abspath(path))
    return p == root or root in p.parents


def display_path(cfg: Config, path: Path) -> str:
    """Path as shown in messages: relative to the templates root."""
    return Path(os.path.relpath(os.path.abspath(path), cfg.templates_dir)).as_posix()


def find_generated_files(output_dir: Path) -> List[Path]:
    if not output_dir.is_dir():
        return []
    return sorted(p for p in output_dir.rglob("*" + OUTPUT_SUFFIX) if p.is_file())


__all__ = [
    "output_path_for",
    "template_path_for",
    "is_within",
    "display_path",
    "find_generated_files",
]

"""
Orphan cleanup: generated files whose template is gone.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .outputs import display_path, find_generated_files, template_path_for
from ..config import Config

logger = logging.getLogger(__name__)


def _prune_empty_dirs(start: Path, root: Path) -> None:
    """Remove empty directories from `start` upwards; `root` and anything outside it are kept."""
    d = start
    while d != root and root in d.parents:
        try:
            if any(d.iterdir()):
                return
            d.rmdir()
        except OSError as e:
            # e.g. a file appeared concurrently; leave the branch alone
            logger.debug("Stopped pruning at %s: %s", d, e)
            return
        d = d.parent


def cleanup_orphans(cfg: Config) -> List[Path]:
    """
    Delete every generated file without a matching template.

    Returns:
        Deleted files
    """
    deleted: List[Path] = []
    for generated in find_generated_files(cfg.output_dir):
        if template_path_for(cfg, generated).is_file():
            continue
        try:
            generated.unlink()
        except OSError as e:
            logger.warning("Failed to delete orphaned %s: %s", display_path(cfg, generated), e)
            continue
        logger.info("Deleted orphaned: %s", display_path(cfg, generated))
        deleted.append(generated)
        _prune_empty_dirs(generated.parent, cfg.output_dir)
    return deleted


__all__ = ["cleanup_orphans"]

"""
Incremental build: discovery, output mapping, orphan cleanup, partial dependencies.
"""

from __future__ import annotations

from .builder import Builder, BuildReport, FileResult, push, render
from .deps import build_partial_dependency_map, dependents_of, extract_partial_refs
from .discovery import build_ignore_spec, discover_templates, is_excluded
from .orphans import cleanup_orphans
from .outputs import output_path_for, template_path_for

__all__ = [
    "Builder",
    "BuildReport",
    "FileResult",
    "render",
    "push",
    "discover_templates",
    "build_ignore_spec",
    "is_excluded",
    "output_path_for",
    "template_path_for",
    "cleanup_orphans",
    "build_partial_dependency_map",
    "dependents_of",
    "extract_partial_refs",
]

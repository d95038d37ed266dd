"""
Partial dependency tracking.

Maps every partial (by absolute path) to the templates that include it,
directly or through other partials. Partials that do not exist yet are
kept in the map too, so creating one rebuilds the templates waiting for it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Set

from ..compiler.schema import PARTIAL_TAG
from ..markdoc.nodes import Node
from ..markdoc.parser import parse_file

logger = logging.getLogger(__name__)

DependencyMap = Dict[Path, Set[Path]]


def extract_partial_refs(ast: Node, base_dir: Path) -> Set[Path]:
    """Direct partial references of one document, resolved against base_dir."""
    refs: Set[Path] = set()
    for node in ast.walk():
        if not node.is_tag_named(PARTIAL_TAG):
            continue
        file = node.attributes.get("file")
        if isinstance(file, str) and file:
            refs.add((base_dir / file).resolve())
    return refs


def reachable_partials(template: Path) -> Set[Path]:
    """All partials a template pulls in, following nested partials once each."""
    seen: Set[Path] = set()
    pending: List[Path] = [template]
    while pending:
        current = pending.pop()
        try:
            ast = parse_file(current)
        except OSError as e:
            logger.warning("Cannot scan %s for partials: %s", current, e)
            continue
        for partial in extract_partial_refs(ast, current.parent):
            if partial in seen:
                continue
            seen.add(partial)
            if partial.is_file():
                pending.append(partial)
    return seen


def build_partial_dependency_map(templates: Iterable[Path]) -> DependencyMap:
    dep_map: DependencyMap = {}
    for template in templates:
        template = template.resolve()
        for partial in reachable_partials(template):
            dep_map.setdefault(partial, set()).add(template)
    return dep_map


def dependents_of(dep_map: DependencyMap, partials: Iterable[Path]) -> Set[Path]:
    out: Set[Path] = set()
    for partial in partials:
        out |= dep_map.get(partial.resolve(), set())
    return out


__all__ = [
    "DependencyMap",
    "extract_partial_refs",
    "reachable_partials",
    "build_partial_dependency_map",
    "dependents_of",
]

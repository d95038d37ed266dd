"""
Template compiler.

Two passes over a freshly parsed AST: the reference index is built first,
then tags are resolved into a render tree that is printed as Markdown.
Nothing is cached between calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .markdown import RenderContext, render_markdown, render_node
from .refs import UNRESOLVED, RefEntry, RefIndex, build_ref_index, lookup, merge_indexes
from .render_tree import RenderNode
from .resolver import TagResolver
from ..markdoc.parser import parse


def compile_text(source: str, base_dir: Path, *, source_path: Optional[Path] = None) -> str:
    """
    Compile template text to Markdown.

    Args:
        source: Template source
        base_dir: Directory partial paths are resolved against
        source_path: Template file, if any (diagnostics and cycle detection)
    """
    ast = parse(source, source_name=str(source_path) if source_path else "")
    index = build_ref_index(ast)
    chain = (source_path.resolve(),) if source_path is not None else ()
    tree = TagResolver(index, base_dir, chain=chain).resolve(ast)
    return render_markdown(tree)


def compile_file(path: Path) -> str:
    path = path.resolve()
    return compile_text(path.read_text(encoding="utf-8"), path.parent, source_path=path)


__all__ = [
    "compile_text",
    "compile_file",
    "build_ref_index",
    "lookup",
    "merge_indexes",
    "RefEntry",
    "RefIndex",
    "UNRESOLVED",
    "TagResolver",
    "RenderNode",
    "RenderContext",
    "render_markdown",
    "render_node",
]

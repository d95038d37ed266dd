"""
Reference index: ordinal markers of list items addressable by selector.

One depth-first pass over the AST. Every `ol` tag opens a list frame; every
`li` tag under a frame bumps the frame counter and registers its selectors:

    #list .class   (item class inside a list with an id)
    .class         (item class inside a list without an id)
    #list #item    (item id inside a list with an id)
    #item          (item id inside a list without an id)

A later registration of the same key overwrites the earlier one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Union

from .schema import ITEM_TAG, LIST_TAG
from ..markdoc.nodes import Node

UNRESOLVED = "?"


@dataclass(frozen=True)
class RefEntry:
    marker: int


RefIndex = Dict[str, RefEntry]


@dataclass
class _ListFrame:
    list_id: Optional[str]
    count: int = 0


def _as_str(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _scoped(list_id: Optional[str], selector: str) -> str:
    return f"#{list_id} {selector}" if list_id else selector


def build_ref_index(ast: Node) -> RefIndex:
    index: RefIndex = {}
    stack: List[_ListFrame] = []

    def walk(node: Node) -> None:
        opened = False
        if node.is_tag_named(LIST_TAG):
            stack.append(_ListFrame(list_id=_as_str(node.attributes.get("id"))))
            opened = True
        elif node.is_tag_named(ITEM_TAG) and stack:
            frame = stack[-1]
            frame.count += 1
            entry = RefEntry(marker=frame.count)

            classes = _as_str(node.attributes.get("cl"))
            if classes:
                for cls in classes.split():
                    index[_scoped(frame.list_id, f".{cls}")] = entry

            item_id = _as_str(node.attributes.get("id"))
            if item_id:
                index[_scoped(frame.list_id, f"#{item_id}")] = entry

        for child in node.children:
            walk(child)

        if opened:
            stack.pop()

    walk(ast)
    return index


def merge_indexes(inherited: Mapping[str, RefEntry], local: Mapping[str, RefEntry]) -> RefIndex:
    """Caller's index overlaid with a partial's own entries (local wins)."""
    merged: RefIndex = dict(inherited)
    merged.update(local)
    return merged


def lookup(index: Mapping[str, RefEntry], selector: object) -> Union[int, str]:
    """Exact-match lookup; never raises. A miss yields '?'."""
    if not isinstance(selector, str):
        return UNRESOLVED
    entry = index.get(selector)
    return entry.marker if entry is not None else UNRESOLVED


__all__ = ["RefEntry", "RefIndex", "UNRESOLVED", "build_ref_index", "merge_indexes", "lookup"]

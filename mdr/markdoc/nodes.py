"""
AST nodes for .mdoc templates.

A template is parsed once into a tree of immutable nodes. Markdown structure
(headings, paragraphs, lists, ...) and `{% tag %}` annotations share one node
class; `type` tells them apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple

# Annotation nodes
TAG = "tag"
FUNCTION = "function"
TEXT = "text"

# Markdown nodes
DOCUMENT = "document"
HEADING = "heading"
PARAGRAPH = "paragraph"
BLOCKQUOTE = "blockquote"
LIST = "list"
ITEM = "item"
FENCE = "fence"
CODE = "code"
HR = "hr"
HARDBREAK = "hardbreak"
SOFTBREAK = "softbreak"
STRONG = "strong"
EM = "em"
STRIKE = "s"
LINK = "link"
IMAGE = "image"
TABLE = "table"
THEAD = "thead"
TBODY = "tbody"
TR = "tr"
TH = "th"
TD = "td"


@dataclass(frozen=True)
class Node:
    """
    One AST node.

    type: node kind (see module constants)
    tag: annotation name for type == "tag", function name for type == "function"
    attributes: read-only mapping of scalar attribute values
    children: ordered child nodes
    content: raw text for text/code/fence leaves
    """
    type: str
    tag: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    children: Tuple[Node, ...] = ()
    content: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_tag(self) -> bool:
        return self.type == TAG

    def is_tag_named(self, name: str) -> bool:
        return self.type == TAG and self.tag == name

    def walk(self) -> Iterator[Node]:
        """Depth-first pre-order traversal, including self."""
        yield self
        for child in self.children:
            yield from child.walk()


def text(content: str) -> Node:
    return Node(type=TEXT, content=content)


def tag(name: str, attributes: Mapping[str, Any] | None = None, *children: Node) -> Node:
    return Node(type=TAG, tag=name, attributes=attributes or {}, children=children)


def document(*children: Node) -> Node:
    return Node(type=DOCUMENT, children=children)


__all__ = ["Node", "text", "tag", "document"]

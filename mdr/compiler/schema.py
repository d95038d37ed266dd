"""
Built-in annotation tags and their attributes.

Only declared attributes reach the render tree; anything else on the tag is
dropped with a debug message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet

LIST_TAG = "ol"
ITEM_TAG = "li"
PARTIAL_TAG = "partial"

REF_FUNCTION = "ref"
# alias accepted in existing templates
REF_FUNCTION_ALIAS = "liRef"


@dataclass(frozen=True)
class TagSchema:
    render: str
    attributes: Dict[str, type] = field(default_factory=dict)
    required: FrozenSet[str] = frozenset()
    self_closing: bool = False


TAGS: Dict[str, TagSchema] = {
    LIST_TAG: TagSchema(render="ol", attributes={"id": str}),
    ITEM_TAG: TagSchema(render="li", attributes={"id": str, "cl": str}),
    PARTIAL_TAG: TagSchema(
        render="partial",
        attributes={"file": str},
        required=frozenset({"file"}),
        self_closing=True,
    ),
}

__all__ = [
    "TagSchema",
    "TAGS",
    "LIST_TAG",
    "ITEM_TAG",
    "PARTIAL_TAG",
    "REF_FUNCTION",
    "REF_FUNCTION_ALIAS",
]

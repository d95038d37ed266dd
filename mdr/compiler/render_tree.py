from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True)
class RenderNode:
    """Resolved element handed to the Markdown renderer (e.g. "h2", "li", "pre")."""
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: Tuple[Renderable, ...] = ()

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


# Leaves come from text nodes and function results
Renderable = Union[RenderNode, str, int, float, bool, None]


def is_named(node: Renderable, *names: str) -> bool:
    return isinstance(node, RenderNode) and node.name in names


__all__ = ["RenderNode", "Renderable", "is_named"]

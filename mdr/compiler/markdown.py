"""
Markdown renderer: render tree -> Markdown text.

`render_node` is a pure function of (node, context). Dispatch goes through
a table keyed by element name; unknown names render their children only.
The context is an immutable value holding the paragraph indent and the open
list frames: entering a list or blockquote returns a new context, so
numbering state never leaks between calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .render_tree import Renderable, RenderNode, is_named

ORDERED = "ol"
UNORDERED = "ul"

LIST_INDENT = "   "

_NEWLINES = re.compile(r"\n+")


class _Counter:
    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value = 0


@dataclass(frozen=True)
class ListFrame:
    """One open list. The counter is private to the frame, i.e. to one list element."""
    kind: str
    counter: _Counter = field(default_factory=_Counter, compare=False, repr=False)

    def next_marker(self) -> str:
        if self.kind != ORDERED:
            return "-"
        self.counter.value += 1
        return f"{self.counter.value}."


@dataclass(frozen=True)
class RenderContext:
    indent: str = ""
    lists: Tuple[ListFrame, ...] = ()

    def push_list(self, kind: str) -> RenderContext:
        return replace(self, lists=self.lists + (ListFrame(kind),))

    @property
    def depth(self) -> int:
        return len(self.lists)

    @property
    def current_list(self) -> Optional[ListFrame]:
        return self.lists[-1] if self.lists else None


# ------------------------------- entry points ------------------------------ #

def render_markdown(root: Renderable) -> str:
    """Whole document: trimmed, with exactly one trailing newline."""
    return render_node(root, RenderContext()).strip() + "\n"


def render_node(node: Renderable, ctx: RenderContext) -> str:
    if node is None:
        return ""
    # bool before int: bool is an int subclass
    if isinstance(node, bool):
        return "true" if node else "false"
    if isinstance(node, (int, float)):
        return str(node)
    if isinstance(node, str):
        return node
    if isinstance(node, (list, tuple)):
        return _join(node, ctx)
    if not isinstance(node, RenderNode):
        return ""
    handler = _RENDERERS.get(node.name, _children)
    return handler(node, ctx)


# --------------------------------- helpers --------------------------------- #

def _join(items: Sequence[Renderable], ctx: RenderContext) -> str:
    return "".join(render_node(c, ctx) for c in items)


def _children(node: RenderNode, ctx: RenderContext) -> str:
    return _join(node.children, ctx)


def _is_list(node: Renderable) -> bool:
    return is_named(node, ORDERED, UNORDERED)


def _is_blank(node: Renderable) -> bool:
    return node is None or (isinstance(node, str) and not node.strip())


def _title_suffix(attributes: Dict) -> str:
    title = attributes.get("title")
    return f' "{title}"' if title else ""


# ------------------------------ block elements ----------------------------- #

def _heading(level: int) -> Callable[[RenderNode, RenderContext], str]:
    prefix = "#" * level

    def render(node: RenderNode, ctx: RenderContext) -> str:
        return f"{prefix} {_children(node, ctx)}\n\n"

    return render


def _paragraph(node: RenderNode, ctx: RenderContext) -> str:
    # list items wrapped in a paragraph: `{% li %}...{% /li %}` written inline
    items = [c for c in node.children if not _is_blank(c)]
    if items and any(is_named(c, "li") for c in items) and all(is_named(c, "li", ORDERED, UNORDERED) for c in items):
        return _join(items, ctx) + "\n"
    content = _children(node, ctx).strip()
    if not content:
        return ""
    return f"{ctx.indent}{content}\n\n"


def _code_block(node: RenderNode, ctx: RenderContext) -> str:
    code = next((c for c in node.children if is_named(c, "code")), None)
    if code is not None:
        language = code.attributes.get("data-language") or ""
        body = "".join(c if isinstance(c, str) else render_node(c, ctx) for c in code.children)
    else:
        language = ""
        body = _children(node, ctx)
    if body and not body.endswith("\n"):
        body += "\n"
    return f"```{language}\n{body}```\n\n"


def _blockquote(node: RenderNode, ctx: RenderContext) -> str:
    # paragraphs carry the indent themselves; every line is prefixed again below
    content = _children(node, replace(ctx, indent="> "))
    lines = [f"> {line}" if line.strip() else ">" for line in content.split("\n")]
    return "\n".join(lines) + "\n\n"


def _hr(node: RenderNode, ctx: RenderContext) -> str:
    return "---\n\n"


def _br(node: RenderNode, ctx: RenderContext) -> str:
    return "  \n"


# ---------------------------------- lists ---------------------------------- #

def _list(node: RenderNode, ctx: RenderContext) -> str:
    inner = ctx.push_list(node.name)
    return _join(node.children, inner)


def _list_item(node: RenderNode, ctx: RenderContext) -> str:
    frame = ctx.current_list
    marker = frame.next_marker() if frame is not None else "-"
    indent = LIST_INDENT * max(ctx.depth - 1, 0)

    nested: List[Renderable] = [c for c in node.children if _is_list(c)]
    if nested:
        inline = [c for c in node.children if not _is_list(c)]
        text = _join(inline, ctx).strip()
        return f"{indent}{marker} {text}\n{_join(nested, ctx)}"

    text = _NEWLINES.sub(" ", _children(node, ctx).strip())
    return f"{indent}{marker} {text}\n"


# ---------------------------------- tables --------------------------------- #

def _table(node: RenderNode, ctx: RenderContext) -> str:
    return _children(node, ctx) + "\n"


def _row(node: RenderNode, ctx: RenderContext) -> str:
    cells = [c for c in node.children if isinstance(c, RenderNode)]
    row = "| " + " | ".join(render_node(c, ctx) for c in cells) + " |\n"
    if any(c.name == "th" for c in cells):
        row += "| " + " | ".join("---" for _ in cells) + " |\n"
    return row


def _cell(node: RenderNode, ctx: RenderContext) -> str:
    return _children(node, ctx).strip()


# ----------------------------- inline elements ----------------------------- #

def _wrap(marker: str) -> Callable[[RenderNode, RenderContext], str]:
    def render(node: RenderNode, ctx: RenderContext) -> str:
        return f"{marker}{_children(node, ctx)}{marker}"

    return render


def _link(node: RenderNode, ctx: RenderContext) -> str:
    href = node.attributes.get("href") or ""
    return f"[{_children(node, ctx)}]({href}{_title_suffix(node.attributes)})"


def _image(node: RenderNode, ctx: RenderContext) -> str:
    src = node.attributes.get("src") or ""
    alt = node.attributes.get("alt") or ""
    return f"![{alt}]({src}{_title_suffix(node.attributes)})"


_RENDERERS: Dict[str, Callable[[RenderNode, RenderContext], str]] = {
    **{f"h{level}": _heading(level) for level in range(1, 7)},
    "p": _paragraph,
    "pre": _code_block,
    "blockquote": _blockquote,
    "hr": _hr,
    "br": _br,
    ORDERED: _list,
    UNORDERED: _list,
    "li": _list_item,
    "table": _table,
    "thead": _children,
    "tbody": _children,
    "tr": _row,
    "th": _cell,
    "td": _cell,
    "strong": _wrap("**"),
    "em": _wrap("*"),
    "s": _wrap("~~"),
    "code": _wrap("`"),
    "a": _link,
    "img": _image,
}


__all__ = ["RenderContext", "ListFrame", "render_markdown", "render_node"]

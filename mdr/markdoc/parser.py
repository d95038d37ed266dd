"""
Parser for .mdoc templates.

Markdown structure is parsed by markdown-it-py; `{% ... %}` annotations are
recognised by two extra rules (a block rule for lines holding a single
annotation and an inline rule for annotations inside text). Both rules emit
flat `mdoc_tag` tokens, which the tree builder nests by tag name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from . import nodes as n
from .lexer import CLOSE, FUNCTION, OPEN, SELF_CLOSING, TagSyntaxError, TagToken, lex_annotation
from .nodes import Node

logger = logging.getLogger(__name__)

MDOC_TOKEN = "mdoc_tag"

# markdown-it container token (without _open/_close) -> AST node type
_CONTAINERS: Dict[str, str] = {
    "paragraph": n.PARAGRAPH,
    "heading": n.HEADING,
    "blockquote": n.BLOCKQUOTE,
    "bullet_list": n.LIST,
    "ordered_list": n.LIST,
    "list_item": n.ITEM,
    "table": n.TABLE,
    "thead": n.THEAD,
    "tbody": n.TBODY,
    "tr": n.TR,
    "th": n.TH,
    "td": n.TD,
    "strong": n.STRONG,
    "em": n.EM,
    "s": n.STRIKE,
    "link": n.LINK,
}


# ---------------------------- markdown-it rules ---------------------------- #

def _lex_or_none(source: str, start_pos: int) -> Optional[TagToken]:
    try:
        return lex_annotation(source, start_pos)
    except TagSyntaxError as e:
        logger.warning("%s; kept as text", e)
        return None


def _annotation_block(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    # indented code block
    if state.sCount[startLine] - state.blkIndent >= 4:
        return False
    start = state.bMarks[startLine] + state.tShift[startLine]
    line = state.src[start:state.eMarks[startLine]].rstrip()
    if not line.startswith("{%") or line.find("%}") != len(line) - 2:
        return False
    tok = _lex_or_none(line, start)
    # a lone function call is inline content of a paragraph
    if tok is None or tok.kind == FUNCTION:
        return False
    if silent:
        return True
    token = state.push(MDOC_TOKEN, "", 0)
    token.meta = {"annotation": tok}
    token.map = [startLine, startLine + 1]
    token.block = True
    state.line = startLine + 1
    return True


def _annotation_inline(state: StateInline, silent: bool) -> bool:
    # offsets of inline annotations are relative to the inline content
    pos = state.pos
    if not state.src.startswith("{%", pos):
        return False
    end = state.src.find("%}", pos + 2)
    if end < 0:
        return False
    tok = _lex_or_none(state.src[pos:end + 2], pos)
    if tok is None:
        return False
    if not silent:
        token = state.push(MDOC_TOKEN, "", 0)
        token.meta = {"annotation": tok}
    state.pos = end + 2
    return True


def annotations_plugin(md: MarkdownIt) -> None:
    """markdown-it plugin registering the annotation rules."""
    md.block.ruler.before(
        "paragraph",
        MDOC_TOKEN,
        _annotation_block,
        {"alt": ["paragraph", "reference", "blockquote", "list"]},
    )
    md.inline.ruler.before("text", MDOC_TOKEN, _annotation_inline)


@lru_cache(maxsize=1)
def _markdown_it() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"typographer": False}).enable("table").enable("strikethrough")
    md.use(annotations_plugin)
    return md


# ------------------------------ tree builder ------------------------------- #

@dataclass
class _Frame:
    type: str
    tag: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)

    def build(self) -> Node:
        return Node(type=self.type, tag=self.tag, attributes=self.attributes, children=tuple(self.children))


class _TreeBuilder:
    """
    Turns the flat markdown-it token stream into a Node tree.

    Annotation tags may open and close at different levels (e.g. opened on
    its own line and closed inside a paragraph). Closing a Markdown block
    auto-closes annotation tags still open inside it; a closing annotation
    with no open counterpart is dropped with a warning.
    """

    def __init__(self, source_name: str = ""):
        self.source_name = source_name
        self.stack: List[_Frame] = [_Frame(type=n.DOCUMENT)]

    def feed(self, tokens: List[Token]) -> None:
        for token in tokens:
            self._token(token)

    def finish(self) -> Node:
        while len(self.stack) > 1:
            frame = self.stack[-1]
            if frame.type == n.TAG:
                logger.warning("%sUnclosed tag '%s'", self._where(), frame.tag)
            self._pop()
        return self.stack[0].build()

    # -- helpers --

    def _where(self) -> str:
        return f"{self.source_name}: " if self.source_name else ""

    def _append(self, node: Node) -> None:
        self.stack[-1].children.append(node)

    def _pop(self) -> None:
        frame = self.stack.pop()
        self._append(frame.build())

    def _close_markdown(self, node_type: str) -> None:
        for i in range(len(self.stack) - 1, 0, -1):
            frame = self.stack[i]
            if frame.type == node_type and frame.tag is None:
                while len(self.stack) > i:
                    top = self.stack[-1]
                    if top.type == n.TAG:
                        logger.warning("%sTag '%s' closed implicitly by end of %s", self._where(), top.tag, node_type)
                    self._pop()
                return

    def _close_tag(self, name: str) -> None:
        for i in range(len(self.stack) - 1, 0, -1):
            frame = self.stack[i]
            if frame.type == n.TAG and frame.tag == name:
                while len(self.stack) > i:
                    self._pop()
                return
        logger.warning("%sClosing tag '{%% /%s %%}' without an opening tag", self._where(), name)

    # -- dispatch --

    def _token(self, token: Token) -> None:
        ttype = token.type

        if ttype == MDOC_TOKEN:
            self._annotation(token.meta["annotation"])
            return

        if ttype == "inline":
            self.feed(token.children or [])
            return

        if ttype.endswith("_open"):
            base = ttype[: -len("_open")]
            # hidden paragraphs (tight lists) are flattened into the list item
            if base == "paragraph" and token.hidden:
                return
            node_type = _CONTAINERS.get(base)
            if node_type is None:
                logger.debug("Unsupported token %s ignored", ttype)
                return
            self.stack.append(_Frame(type=node_type, attributes=self._container_attributes(base, token)))
            return

        if ttype.endswith("_close"):
            base = ttype[: -len("_close")]
            if base == "paragraph" and token.hidden:
                return
            node_type = _CONTAINERS.get(base)
            if node_type is not None:
                self._close_markdown(node_type)
            return

        leaf = self._leaf(token)
        if leaf is not None:
            self._append(leaf)

    def _annotation(self, tok: TagToken) -> None:
        if tok.kind == OPEN:
            self.stack.append(_Frame(type=n.TAG, tag=tok.name, attributes=dict(tok.attributes)))
        elif tok.kind == CLOSE:
            self._close_tag(tok.name)
        elif tok.kind == SELF_CLOSING:
            self._append(Node(type=n.TAG, tag=tok.name, attributes=tok.attributes))
        elif tok.kind == FUNCTION:
            self._append(Node(type=n.FUNCTION, tag=tok.name, attributes={"args": tok.args}))

    @staticmethod
    def _container_attributes(base: str, token: Token) -> Dict[str, Any]:
        if base == "heading":
            return {"level": int(token.tag[1:])}
        if base == "ordered_list":
            start = token.attrGet("start")
            return {"ordered": True, "start": int(start) if start is not None else 1}
        if base == "bullet_list":
            return {"ordered": False}
        if base == "link":
            attrs: Dict[str, Any] = {"href": token.attrGet("href") or ""}
            title = token.attrGet("title")
            if title:
                attrs["title"] = title
            return attrs
        return {}

    @staticmethod
    def _leaf(token: Token) -> Optional[Node]:
        ttype = token.type
        if ttype in ("text", "html_inline", "html_block"):
            return Node(type=n.TEXT, content=token.content)
        if ttype == "code_inline":
            return Node(type=n.CODE, content=token.content)
        if ttype == "fence":
            info = (token.info or "").strip()
            language = info.split()[0] if info else ""
            return Node(type=n.FENCE, attributes={"language": language}, content=token.content)
        if ttype == "code_block":
            return Node(type=n.FENCE, attributes={"language": ""}, content=token.content)
        if ttype == "hr":
            return Node(type=n.HR)
        if ttype == "softbreak":
            return Node(type=n.SOFTBREAK)
        if ttype == "hardbreak":
            return Node(type=n.HARDBREAK)
        if ttype == "image":
            attrs: Dict[str, Any] = {"src": token.attrGet("src") or "", "alt": token.content}
            title = token.attrGet("title")
            if title:
                attrs["title"] = title
            return Node(type=n.IMAGE, attributes=attrs)
        logger.debug("Unsupported token %s ignored", ttype)
        return None


# --------------------------------- API ------------------------------------ #

def parse(source: str, *, source_name: str = "") -> Node:
    """
    Parse template text into an AST.

    Args:
        source: Template source
        source_name: Used in diagnostics only

    Returns:
        Document node
    """
    builder = _TreeBuilder(source_name)
    builder.feed(_markdown_it().parse(source))
    return builder.finish()


def parse_file(path: Path) -> Node:
    return parse(path.read_text(encoding="utf-8"), source_name=str(path))


__all__ = ["parse", "parse_file", "annotations_plugin", "MDOC_TOKEN"]

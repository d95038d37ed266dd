"""
Tag resolver: AST + reference index -> render tree.

Applies the built-in tag semantics (ol, li, partial), evaluates function
calls and maps Markdown nodes to render elements. Partials are parsed and
indexed on their own, their index is merged over the caller's, and they are
resolved relative to their own directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .refs import RefEntry, build_ref_index, lookup, merge_indexes
from .render_tree import Renderable, RenderNode
from .schema import PARTIAL_TAG, REF_FUNCTION, REF_FUNCTION_ALIAS, TAGS, TagSchema
from ..errors import CyclicInclusionError, TemplateError
from ..markdoc import nodes as n
from ..markdoc.nodes import Node
from ..markdoc.parser import parse_file

logger = logging.getLogger(__name__)

# Markdown node types whose render name is the node type itself
_PASSTHROUGH = {
    n.BLOCKQUOTE: "blockquote",
    n.HR: "hr",
    n.STRONG: "strong",
    n.EM: "em",
    n.STRIKE: "s",
    n.TABLE: "table",
    n.THEAD: "thead",
    n.TBODY: "tbody",
    n.TR: "tr",
    n.TH: "th",
    n.TD: "td",
    n.PARAGRAPH: "p",
    n.ITEM: "li",
    n.HARDBREAK: "br",
    n.DOCUMENT: "article",
}


class TagResolver:
    """
    Resolver for one document (template or partial).

    Args:
        index: Selector index visible to this document
        base_dir: Directory partial paths are resolved against
        chain: Files being resolved, outermost first; used to detect
               a partial that (indirectly) includes itself
    """

    def __init__(self, index: Mapping[str, RefEntry], base_dir: Path, *, chain: Tuple[Path, ...] = ()):
        self.index = dict(index)
        self.base_dir = base_dir
        self.chain = chain
        self.functions: Dict[str, Callable[..., Any]] = {
            REF_FUNCTION: self._ref,
            REF_FUNCTION_ALIAS: self._ref,
        }

    def resolve(self, ast: Node) -> RenderNode:
        out = self._node(ast)
        if isinstance(out, RenderNode):
            return out
        return RenderNode("article", {}, tuple(self._flatten([out])))

    # ------------------------------------------------------------------ #

    @staticmethod
    def _flatten(items: List[Any]) -> List[Renderable]:
        flat: List[Renderable] = []
        for item in items:
            if isinstance(item, list):
                flat.extend(item)
            else:
                flat.append(item)
        return flat

    def _children(self, node: Node) -> Tuple[Renderable, ...]:
        return tuple(self._flatten([self._node(c) for c in node.children]))

    def _node(self, node: Node) -> Any:
        """Returns a Renderable, or a list of them for transparent nodes."""
        if node.type == n.TEXT:
            return node.content or ""
        if node.type == n.TAG:
            return self._tag(node)
        if node.type == n.FUNCTION:
            return self._function(node)
        return self._markdown(node)

    def _markdown(self, node: Node) -> Any:
        t = node.type
        if t == n.HEADING:
            return RenderNode(f"h{node.attributes.get('level', 1)}", {}, self._children(node))
        if t == n.LIST:
            return RenderNode("ol" if node.attributes.get("ordered") else "ul", {}, self._children(node))
        if t == n.FENCE:
            language = node.attributes.get("language") or ""
            code = RenderNode("code", {"data-language": language}, (node.content or "",))
            return RenderNode("pre", {"data-language": language}, (code,))
        if t == n.CODE:
            return RenderNode("code", {}, (node.content or "",))
        if t == n.SOFTBREAK:
            return "\n"
        if t == n.LINK:
            return RenderNode("a", dict(node.attributes), self._children(node))
        if t == n.IMAGE:
            return RenderNode("img", dict(node.attributes), ())
        name = _PASSTHROUGH.get(t)
        if name is None:
            logger.debug("Unknown node type %r rendered as its children", t)
            return list(self._children(node))
        return RenderNode(name, {}, self._children(node))

    # ------------------------------------------------------------------ #

    def _tag(self, node: Node) -> Any:
        schema = TAGS.get(node.tag or "")
        if schema is None:
            # unknown tags are transparent
            return list(self._children(node))
        attrs = self._tag_attributes(node, schema)
        if schema.self_closing and node.children:
            logger.warning("Tag '%s' is self-closing; its content is ignored", node.tag)
        if node.tag == PARTIAL_TAG:
            return self._partial(attrs["file"])
        return RenderNode(schema.render, attrs, self._children(node))

    def _tag_attributes(self, node: Node, schema: TagSchema) -> Dict[str, Any]:
        attrs: Dict[str, Any] = {}
        for key, value in node.attributes.items():
            expected = schema.attributes.get(key)
            if expected is None:
                logger.debug("Attribute '%s' is not declared for tag '%s'", key, node.tag)
                continue
            if value is not None and not isinstance(value, expected):
                value = str(value)
            attrs[key] = value
        missing = [k for k in sorted(schema.required) if attrs.get(k) in (None, "")]
        if missing:
            raise TemplateError(
                f"Tag '{node.tag}' requires attribute(s): {', '.join(missing)}",
                self.chain[-1] if self.chain else None,
            )
        return attrs

    def _partial(self, file: str) -> Optional[RenderNode]:
        path = (self.base_dir / file).resolve()
        if not path.is_file():
            logger.warning("Partial not found: %s", path)
            return None
        if path in self.chain:
            raise CyclicInclusionError(self.chain + (path,))

        ast = parse_file(path)
        index = merge_indexes(self.index, build_ref_index(ast))
        nested = TagResolver(index, path.parent, chain=self.chain + (path,))
        return nested.resolve(ast)

    # ------------------------------------------------------------------ #

    def _function(self, node: Node) -> Renderable:
        fn = self.functions.get(node.tag or "")
        if fn is None:
            logger.warning("Unknown function '%s' rendered as empty", node.tag)
            return None
        return fn(*node.attributes.get("args", ()))

    def _ref(self, selector: object = None, *_ignored: object) -> Renderable:
        return lookup(self.index, selector)


__all__ = ["TagResolver"]

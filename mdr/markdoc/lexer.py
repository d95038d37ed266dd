"""
Lexer for `{% ... %}` annotations in .mdoc templates.

Recognised forms:
  - {% name attr="value" other=1 %}   opening tag
  - {% /name %}                       closing tag
  - {% name attr="value" /%}          self-closing tag
  - {% name("arg", 2) %}              function call

Attribute and argument values are literals: double-quoted strings,
integers, floats, true, false and null.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..errors import TemplateError

OPEN = "open"
CLOSE = "close"
SELF_CLOSING = "self_closing"
FUNCTION = "function"


class TagSyntaxError(TemplateError):
    """Malformed annotation."""
    pass


@dataclass(frozen=True)
class TagToken:
    """
    One annotation.

    Keeps its position in the source so callers can slice the text around it.
    """
    kind: str                     # open | close | self_closing | function
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    args: Tuple[Any, ...] = ()
    start_pos: int = 0
    end_pos: int = 0
    full_match: str = ""


ANNOTATION_PATTERN = re.compile(r"\{%(?P<body>.*?)%\}", re.DOTALL)

_NAME = r"[A-Za-z_][\w\-]*"
_NAME_RE = re.compile(rf"^(?P<name>{_NAME})(?P<rest>.*)$", re.DOTALL)
_CALL_RE = re.compile(rf"^(?P<name>{_NAME})\s*\((?P<args>.*)\)$", re.DOTALL)
_LITERAL = r'"(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?|true|false|null'
_ATTR_RE = re.compile(rf"\s*(?P<key>{_NAME})\s*=\s*(?P<value>{_LITERAL})")
_ARG_RE = re.compile(rf"\s*(?P<value>{_LITERAL})\s*(?P<sep>,|$)")


def _literal(raw: str) -> Any:
    if raw.startswith('"'):
        return json.loads(raw)
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None
    if "." in raw:
        return float(raw)
    return int(raw)


def _parse_attributes(rest: str, full: str) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {}
    pos = 0
    while pos < len(rest):
        if not rest[pos:].strip():
            break
        m = _ATTR_RE.match(rest, pos)
        if not m:
            raise TagSyntaxError(f"Invalid attribute syntax in {full!r} near {rest[pos:].strip()!r}")
        attrs[m.group("key")] = _literal(m.group("value"))
        pos = m.end()
    return attrs


def _parse_args(raw: str, full: str) -> Tuple[Any, ...]:
    args: List[Any] = []
    if not raw.strip():
        return ()
    pos = 0
    while pos < len(raw):
        m = _ARG_RE.match(raw, pos)
        if not m:
            raise TagSyntaxError(f"Invalid function arguments in {full!r}")
        args.append(_literal(m.group("value")))
        pos = m.end()
        if not m.group("sep"):
            break
    return tuple(args)


def lex_annotation(source: str, start_pos: int = 0) -> TagToken:
    """
    Lex a single annotation.

    Args:
        source: Annotation text including the `{%` and `%}` delimiters
        start_pos: Offset of the annotation in the enclosing document

    Raises:
        TagSyntaxError: If the annotation body cannot be parsed
    """
    m = ANNOTATION_PATTERN.fullmatch(source)
    if not m:
        raise TagSyntaxError(f"Not an annotation: {source!r}")
    body = m.group("body").strip()
    end_pos = start_pos + len(source)

    if body.startswith("/"):
        name = body[1:].strip()
        if not re.fullmatch(_NAME, name):
            raise TagSyntaxError(f"Invalid closing tag: {source!r}")
        return TagToken(kind=CLOSE, name=name, start_pos=start_pos, end_pos=end_pos, full_match=source)

    call = _CALL_RE.match(body)
    if call:
        return TagToken(
            kind=FUNCTION,
            name=call.group("name"),
            args=_parse_args(call.group("args"), source),
            start_pos=start_pos,
            end_pos=end_pos,
            full_match=source,
        )

    kind = OPEN
    if body.endswith("/"):
        kind = SELF_CLOSING
        body = body[:-1].rstrip()

    nm = _NAME_RE.match(body)
    if not nm:
        raise TagSyntaxError(f"Invalid tag: {source!r}")
    rest = nm.group("rest")
    if rest and not rest[0].isspace():
        raise TagSyntaxError(f"Invalid tag name in {source!r}")
    return TagToken(
        kind=kind,
        name=nm.group("name"),
        attributes=_parse_attributes(rest, source),
        start_pos=start_pos,
        end_pos=end_pos,
        full_match=source,
    )


__all__ = [
    "TagToken",
    "TagSyntaxError",
    "OPEN",
    "CLOSE",
    "SELF_CLOSING",
    "FUNCTION",
    "ANNOTATION_PATTERN",
    "lex_annotation",
]

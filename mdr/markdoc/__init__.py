"""
.mdoc template syntax: Markdown plus `{% ... %}` annotations.
"""

from __future__ import annotations

from .lexer import TagSyntaxError, TagToken, lex_annotation
from .nodes import Node
from .parser import parse, parse_file

__all__ = ["Node", "TagToken", "TagSyntaxError", "lex_annotation", "parse", "parse_file"]

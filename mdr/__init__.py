"""
mdr: compile .mdoc templates (Markdown with `{% %}` tags) into plain Markdown.
"""

from __future__ import annotations

from .compiler import compile_file, compile_text
from .config import Config, load_config
from .errors import ConfigError, CyclicInclusionError, MdrUserError, MissingOutputError, TemplateError

__all__ = [
    "compile_file",
    "compile_text",
    "Config",
    "load_config",
    "MdrUserError",
    "ConfigError",
    "TemplateError",
    "CyclicInclusionError",
    "MissingOutputError",
]

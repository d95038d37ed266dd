"""
Configuration loading for mdr.
"""

from __future__ import annotations

from .load import load_config
from .model import Config, DEFAULT_DEBOUNCE_MS
from .paths import (
    CONFIG_FILE,
    OUTPUT_SUFFIX,
    PARTIAL_SUFFIX,
    TEMPLATE_SUFFIX,
    is_output,
    is_partial,
    is_template,
)

__all__ = [
    "Config",
    "DEFAULT_DEBOUNCE_MS",
    "load_config",
    "CONFIG_FILE",
    "TEMPLATE_SUFFIX",
    "PARTIAL_SUFFIX",
    "OUTPUT_SUFFIX",
    "is_template",
    "is_partial",
    "is_output",
]

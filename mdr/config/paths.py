from __future__ import annotations

from pathlib import Path

# Single source of truth for file naming conventions.
CONFIG_FILE = "mdr.yaml"
TEMPLATE_SUFFIX = ".mdoc"
PARTIAL_SUFFIX = ".p.mdoc"
OUTPUT_SUFFIX = ".g.md"


def config_path(root: Path) -> Path:
    """Default location of the config file: <root>/mdr.yaml."""
    return (root / CONFIG_FILE).resolve()


def is_partial(path: Path | str) -> bool:
    return str(path).endswith(PARTIAL_SUFFIX)


def is_template(path: Path | str) -> bool:
    """A renderable template: *.mdoc but not *.p.mdoc."""
    s = str(path)
    return s.endswith(TEMPLATE_SUFFIX) and not s.endswith(PARTIAL_SUFFIX)


def is_output(path: Path | str) -> bool:
    return str(path).endswith(OUTPUT_SUFFIX)


__all__ = [
    "CONFIG_FILE",
    "TEMPLATE_SUFFIX",
    "PARTIAL_SUFFIX",
    "OUTPUT_SUFFIX",
    "config_path",
    "is_partial",
    "is_template",
    "is_output",
]

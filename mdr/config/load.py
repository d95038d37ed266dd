from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import Config
from .paths import config_path
from ..errors import ConfigError

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> Dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"Failed to parse {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return data


def load_config(path: Path | None = None, *, root: Path | None = None) -> Config:
    """
    Load project configuration.

    Args:
        path: Explicit config file; defaults to <root>/mdr.yaml
        root: Directory searched when no path is given (cwd by default)

    Returns:
        Validated Config with absolute paths
    """
    if path is None:
        path = config_path(root or Path.cwd())
    path = path.resolve()
    if not path.is_file():
        raise ConfigError(
            f"{path.name} not found in {path.parent}\n\n"
            "Create a config file with at least:\n\n"
            "  templates_dir: ./templates\n"
            "  output_dir: ./out\n"
        )
    return Config.from_dict(_read_yaml_map(path), base_dir=path.parent, ctx=path.name)


__all__ = ["load_config"]

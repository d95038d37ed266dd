from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ConfigError

DEFAULT_DEBOUNCE_MS = 100

# camelCase spellings accepted as aliases
_ALIASES = {
    "templatesDir": "templates_dir",
    "outputDir": "output_dir",
    "debounceMs": "debounce_ms",
}


# --- helpers ---------------------------------------------------------------
def _assert_only_keys(d: Dict[str, Any] | None, allowed: Iterable[str], *, ctx: str) -> None:
    if d is None:
        return
    allowed_set = set(allowed)
    extra = set(d.keys()) - allowed_set
    if extra:
        raise ConfigError(f"{ctx}: unknown key(s): {', '.join(sorted(extra))}")


def _normalize_keys(d: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in d.items():
        key = _ALIASES.get(k, k)
        if key in out:
            raise ConfigError(f"Config: duplicate key '{k}' (also given as '{key}')")
        out[key] = v
    return out


@dataclass(frozen=True)
class Config:
    """
    Project configuration.

    Paths are absolute: relative values from the config file are resolved
    against the directory holding that file.
    """
    templates_dir: Path
    output_dir: Path
    ignore: List[str] = field(default_factory=list)
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]], *, base_dir: Path, ctx: str = "mdr.yaml") -> Config:
        if not d:
            raise ConfigError(f"{ctx}: templates_dir is required")
        if not isinstance(d, dict):
            raise ConfigError(f"{ctx}: config must be a mapping")
        d = _normalize_keys(d)
        _assert_only_keys(d, ["templates_dir", "output_dir", "ignore", "debounce_ms"], ctx=ctx)

        templates_raw = d.get("templates_dir")
        output_raw = d.get("output_dir")
        if not templates_raw:
            raise ConfigError(f"{ctx}: templates_dir is required")
        if not output_raw:
            raise ConfigError(f"{ctx}: output_dir is required")
        if not isinstance(templates_raw, str) or not isinstance(output_raw, str):
            raise ConfigError(f"{ctx}: templates_dir and output_dir must be strings")

        ignore_raw = d.get("ignore") or []
        if isinstance(ignore_raw, str) or not isinstance(ignore_raw, (list, tuple)):
            raise ConfigError(f"{ctx}: ignore must be a list of relative paths")
        if not all(isinstance(x, str) and x.strip() for x in ignore_raw):
            raise ConfigError(f"{ctx}: ignore entries must be non-empty strings")

        debounce_raw = d.get("debounce_ms", DEFAULT_DEBOUNCE_MS)
        if debounce_raw is None:
            debounce_raw = DEFAULT_DEBOUNCE_MS
        if isinstance(debounce_raw, bool) or not isinstance(debounce_raw, int) or debounce_raw < 0:
            raise ConfigError(f"{ctx}: debounce_ms must be a non-negative integer")

        return Config(
            templates_dir=(base_dir / templates_raw).resolve(),
            output_dir=(base_dir / output_raw).resolve(),
            ignore=[x.strip() for x in ignore_raw],
            debounce_ms=debounce_raw,
        )


__all__ = ["Config", "DEFAULT_DEBOUNCE_MS"]

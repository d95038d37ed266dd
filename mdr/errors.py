"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from MdrUserError.

Programming errors and bugs should NOT inherit from MdrUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class MdrUserError(Exception):
    """
    Base class for all user-facing errors in mdr.

    These errors indicate problems that the user can fix:
    configuration issues, broken templates, missing output files, etc.
    """
    pass


class ConfigError(MdrUserError):
    """Invalid or incomplete mdr.yaml."""
    pass


class TemplateError(MdrUserError):
    """A template could not be compiled."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(f"{path}: {message}" if path is not None else message)
        self.path = path


class CyclicInclusionError(TemplateError):
    """A partial (directly or through other partials) includes itself."""

    def __init__(self, chain: Sequence[Path]):
        self.chain = list(chain)
        cycle = " -> ".join(str(p) for p in self.chain)
        super().__init__(f"Circular partial inclusion detected: {cycle}")


class MissingOutputError(MdrUserError):
    """
    Safe rename violation: the generated file must exist before `render`
    is allowed to overwrite it.
    """

    def __init__(self, output: Path, display: str | None = None):
        self.output = output
        shown = display or str(output)
        super().__init__(f"{shown} does not exist. Create it first to enable rendering.")


__all__ = [
    "MdrUserError",
    "ConfigError",
    "TemplateError",
    "CyclicInclusionError",
    "MissingOutputError",
]

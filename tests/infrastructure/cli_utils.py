"""
Utilities for working with the CLI in tests.
"""

import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.pop("MDR_DEBUG", None)
    return subprocess.run(
        [sys.executable, "-m", "mdr", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


__all__ = ["run_cli"]

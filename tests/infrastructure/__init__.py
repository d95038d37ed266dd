"""
Shared test infrastructure for mdr.

Modules:
- file_utils: creating files and project layouts
- config_utils: Config objects without a config file
- cli_utils: running the CLI in a subprocess
- samples: shared template sources and their expected output
"""

from .file_utils import write, write_config, write_template
from .config_utils import make_config
from .cli_utils import run_cli
from .samples import STEPS_TEMPLATE, STEPS_OUTPUT

__all__ = ["write", "write_config", "write_template", "make_config", "run_cli", "STEPS_TEMPLATE", "STEPS_OUTPUT"]

import logging
from pathlib import Path

import pytest

from mdr.config import Config, load_config

from tests.infrastructure.file_utils import write_config, write_template
from tests.infrastructure.samples import STEPS_TEMPLATE


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Minimal project: mdr.yaml, templates/guide.mdoc and an empty out/."""
    root = tmp_path
    write_config(root, debounce_ms=20)
    write_template(root / "templates" / "guide.mdoc", STEPS_TEMPLATE)
    (root / "out").mkdir()
    return root


@pytest.fixture
def cfg(tmpproj: Path) -> Config:
    return load_config(root=tmpproj)


@pytest.fixture(autouse=True)
def _mdr_logging(caplog):
    # mdr loggers propagate to root; caplog collects INFO and above
    caplog.set_level(logging.INFO, logger="mdr")

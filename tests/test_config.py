from pathlib import Path

import pytest

from mdr.config import Config, DEFAULT_DEBOUNCE_MS, load_config
from mdr.errors import ConfigError

from tests.infrastructure.file_utils import write, write_config


def test_load_config_resolves_paths_against_config_dir(tmp_path: Path):
    write_config(tmp_path, templates_dir="docs/src", output_dir="docs/out", ignore=["drafts"])
    cfg = load_config(root=tmp_path)
    assert cfg.templates_dir == (tmp_path / "docs" / "src").resolve()
    assert cfg.output_dir == (tmp_path / "docs" / "out").resolve()
    assert cfg.ignore == ["drafts"]
    assert cfg.debounce_ms == DEFAULT_DEBOUNCE_MS


def test_explicit_config_path(tmp_path: Path):
    path = write(tmp_path / "conf" / "custom.yaml", "templates_dir: ../t\noutput_dir: ../o\ndebounce_ms: 250\n")
    cfg = load_config(path)
    assert cfg.templates_dir == (tmp_path / "t").resolve()
    assert cfg.debounce_seconds == 0.25


def test_camel_case_aliases(tmp_path: Path):
    cfg = Config.from_dict(
        {"templatesDir": "t", "outputDir": "o", "debounceMs": 5},
        base_dir=tmp_path,
    )
    assert cfg.templates_dir == (tmp_path / "t").resolve()
    assert cfg.debounce_ms == 5


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="mdr.yaml not found"):
        load_config(root=tmp_path)


def test_invalid_yaml(tmp_path: Path):
    write(tmp_path / "mdr.yaml", "templates_dir: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(root=tmp_path)


def test_yaml_must_be_a_mapping(tmp_path: Path):
    write(tmp_path / "mdr.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(root=tmp_path)


@pytest.mark.parametrize("data, message", [
    ({}, "templates_dir is required"),
    ({"templates_dir": "t"}, "output_dir is required"),
    ({"templates_dir": 1, "output_dir": "o"}, "must be strings"),
    ({"templates_dir": "t", "output_dir": "o", "ignore": "drafts"}, "ignore must be a list"),
    ({"templates_dir": "t", "output_dir": "o", "ignore": [""]}, "non-empty strings"),
    ({"templates_dir": "t", "output_dir": "o", "debounce_ms": -1}, "debounce_ms"),
    ({"templates_dir": "t", "output_dir": "o", "debounce_ms": True}, "debounce_ms"),
    ({"templates_dir": "t", "output_dir": "o", "extra": 1}, "unknown key"),
    ({"templates_dir": "t", "templatesDir": "t2", "output_dir": "o"}, "duplicate key"),
])
def test_validation_errors(tmp_path: Path, data, message):
    with pytest.raises(ConfigError, match=message):
        Config.from_dict(data, base_dir=tmp_path)


def test_null_debounce_uses_default(tmp_path: Path):
    cfg = Config.from_dict({"templates_dir": "t", "output_dir": "o", "debounce_ms": None}, base_dir=tmp_path)
    assert cfg.debounce_ms == DEFAULT_DEBOUNCE_MS

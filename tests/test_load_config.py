"""Tests for configuration loading and merging."""

from pathlib import Path

import pytest
import yaml

from sveltedoc.deep_merge import deep_merge
from sveltedoc.load_config import DEFAULT_CONFIG, load_config
from sveltedoc.options import ExtractOptions


def test_deep_merge_scalars() -> None:
    """Verify scalar replacement in deep merge."""
    base = {"a": 1, "b": 2}
    update = {"b": 3, "c": 4}
    merged = deep_merge(base, update)
    assert merged == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    base = {"options": {"dialect_version": 3, "ignore_private": False}}
    update = {"options": {"ignore_private": True}}
    merged = deep_merge(base, update)
    assert merged == {"options": {"dialect_version": 3, "ignore_private": True}}


def test_deep_merge_arrays_replace() -> None:
    """Verify that arrays are replaced by default."""
    merged = deep_merge({"arr": [1, 2]}, {"arr": [3, 4]})
    assert merged == {"arr": [3, 4]}


def test_deep_merge_ignore_keywords_additive() -> None:
    """Verify that the ignore_keywords list is merged additively."""
    base = {"ignore_keywords": ["internal", "hidden"]}
    update = {"ignore_keywords": ["hidden", "deprecated"]}
    merged = deep_merge(base, update)
    assert merged["ignore_keywords"] == ["internal", "hidden", "deprecated"]


def test_load_config_defaults() -> None:
    """Verify that default config is loaded when no path is provided."""
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_with_file(tmp_path: Path) -> None:
    """Verify that user config correctly overrides defaults."""
    config_file = tmp_path / "sveltedoc.yml"
    config_data = {
        "options": {"dialect_version": 2},
        "ignore_keywords": ["internal"],
    }
    config_file.write_text(yaml.dump(config_data))

    loaded = load_config(str(config_file))
    assert loaded["options"]["dialect_version"] == 2
    assert loaded["options"]["include_source_locations"] is False  # Default
    assert loaded["ignore_keywords"] == ["internal"]
    assert DEFAULT_CONFIG["options"]["dialect_version"] == 3


def test_load_config_missing_file(tmp_path: Path) -> None:
    """Verify a missing file falls back to defaults."""
    assert load_config(tmp_path / "absent.yml") == DEFAULT_CONFIG


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    """Verify a YAML document that is not a mapping is rejected."""
    config_file = tmp_path / "bad.yml"
    config_file.write_text("- just\n- a list\n")
    with pytest.raises(SystemExit):
        load_config(config_file)


def test_options_from_config() -> None:
    """Verify options are built from config and overridden by arguments."""
    config = deep_merge(
        load_config(None),
        {"options": {"ignore_private": True}, "ignore_keywords": ["internal"]},
    )
    options = ExtractOptions.from_config(config, dialect_version=None, file_name="A")
    assert options.ignore_private is True
    assert options.dialect_version == 3
    assert options.ignore_keywords == ("internal",)
    assert options.file_name == "A"

"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error handling
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from umlseed.config.loader import (
    GLOBAL_CONFIG_PATH,
    _deep_merge,
    _load_yaml,
    load_config,
)
from umlseed.config.models import GenerationConfig
from umlseed.core.errors import ConfigError, ErrorCode


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("generation:\n  rows_per_table: 5\n")

        assert _load_yaml(yaml_file) == {"generation": {"rows_per_table": 5}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is not a config."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"generation": {"rows_per_table": 20, "seed": 1}}
        override = {"generation": {"seed": 7}}
        assert _deep_merge(base, override) == {"generation": {"rows_per_table": 20, "seed": 7}}

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict override replaces dict base."""
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}
        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        """Base dict is not mutated."""
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        """Returns default config when no config files exist."""
        with patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config()
        assert config.logging.level == "INFO"
        assert config.generation.rows_per_table == 20
        assert config.generation.seed is None

    def test_loads_explicit_config(self, tmp_path: Path) -> None:
        """Loads config from an explicit YAML file."""
        config_file = tmp_path / "umlseed.yaml"
        config_file.write_text("generation:\n  rows_per_table: 3\n  seed: 11\n")

        with patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(config_file)
        assert config.generation.rows_per_table == 3
        assert config.generation.seed == 11

    def test_explicit_config_overrides_global(self, tmp_path: Path) -> None:
        """Explicit file values win over the global file, section by key."""
        global_file = tmp_path / "global.yaml"
        global_file.write_text("generation:\n  rows_per_table: 3\n  seed: 1\n")
        config_file = tmp_path / "local.yaml"
        config_file.write_text("generation:\n  seed: 2\n")

        with patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(config_file)
        assert config.generation.rows_per_table == 3
        assert config.generation.seed == 2

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        """Environment variables override YAML config."""
        config_file = tmp_path / "umlseed.yaml"
        config_file.write_text("generation:\n  rows_per_table: 3\n")

        with (
            patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"UMLSEED__GENERATION__ROWS_PER_TABLE": "50"}),
        ):
            config = load_config(config_file)
        assert config.generation.rows_per_table == 50

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        """Keyword arguments override everything."""
        with (
            patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"UMLSEED__GENERATION__ROWS_PER_TABLE": "50"}),
        ):
            config = load_config(generation=GenerationConfig(rows_per_table=1))
        assert config.generation.rows_per_table == 1

    def test_store_path_is_expanded(self, tmp_path: Path) -> None:
        """A ~ in the store path is expanded."""
        with patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config()
        assert "~" not in config.store.path

    def test_raises_for_missing_explicit_file(self, tmp_path: Path) -> None:
        """An explicit config path must exist."""
        with (
            patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid config values."""
        config_file = tmp_path / "umlseed.yaml"
        config_file.write_text("generation:\n  rows_per_table: -1\n")

        with (
            patch("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(config_file)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "rows_per_table" in exc_info.value.details["field"]


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        """Path is in user config directory."""
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "umlseed" in str(GLOBAL_CONFIG_PATH)

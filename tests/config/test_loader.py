"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: kwargs > env > project yaml > global yaml
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ntagger.config import loader
from ntagger.config.loader import _deep_merge, _load_yaml, load_config
from ntagger.core.errors import ConfigError, ErrorCode


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("tags:\n  include_private: true\n")
        assert _load_yaml(yaml_file) == {"tags": {"include_private": True}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert _load_yaml(yaml_file) == {}

    def test_invalid_yaml_raises_config_error(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("tags: [unclosed\n")
        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_non_mapping_raises_config_error(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_override(self) -> None:
        base = {"tags": {"language_name": "Nim", "exclude": ["a"]}, "atlas": {"deps_dir_name": "deps"}}
        override = {"tags": {"exclude": ["b"]}}
        assert _deep_merge(base, override) == {
            "tags": {"language_name": "Nim", "exclude": ["b"]},
            "atlas": {"deps_dir_name": "deps"},
        }

    def test_base_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.tags.language_name == "Nim"
        assert config.logging.level == "WARNING"

    def test_project_yaml(self, tmp_path: Path) -> None:
        (tmp_path / ".ntagger.yaml").write_text("tags:\n  exclude: [generated]\n")
        assert load_config(tmp_path).tags.exclude == ["generated"]

    def test_project_overrides_global(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # Given
        global_file = tmp_path / "global.yaml"
        global_file.write_text("discovery:\n  nim_executable: /opt/nim/bin/nim\n  query_timeout_sec: 5\n")
        monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", global_file)
        project = tmp_path / "proj"
        project.mkdir()
        (project / ".ntagger.yaml").write_text("discovery:\n  query_timeout_sec: 9\n")

        # When
        config = load_config(project)

        # Then
        assert config.discovery.nim_executable == "/opt/nim/bin/nim"
        assert config.discovery.query_timeout_sec == 9

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".ntagger.yaml").write_text("logging:\n  level: INFO\n")
        monkeypatch.setenv("NTAGGER__LOGGING__LEVEL", "DEBUG")
        assert load_config(tmp_path).logging.level == "DEBUG"

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NTAGGER__TAGS__LANGUAGE_NAME", "FromEnv")
        config = load_config(tmp_path, tags={"language_name": "FromKwargs"})
        assert config.tags.language_name == "FromKwargs"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / ".ntagger.yaml").write_text("discovery:\n  query_timeout_sec: -1\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert exc_info.value.details["field"].startswith("discovery")

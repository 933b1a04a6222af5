"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from unvoid.config.loader import _deep_merge, _load_yaml, load_config
from unvoid.core.errors import ConfigError


@pytest.fixture(autouse=True)
def _no_global_config(tmp_path: Path) -> object:
    """Keep the developer's ~/.config/unvoid out of the tests."""
    with patch("unvoid.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "absent.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("logging:\n  level: DEBUG\n")

        assert _load_yaml(yaml_file) == {"logging": {"level": "DEBUG"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_dicts_merge(self) -> None:
        base = {"logging": {"level": "INFO", "outputs": []}}
        override = {"logging": {"level": "DEBUG"}}
        assert _deep_merge(base, override) == {"logging": {"level": "DEBUG", "outputs": []}}

    def test_base_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.compdb.filename == "compile_commands.json"
        assert config.rewrite.c_extensions == [".c"]
        assert config.logging.level == "WARNING"

    def test_project_yaml_is_read(self, tmp_path: Path) -> None:
        (tmp_path / ".unvoid.yaml").write_text(
            "compdb:\n  filename: cc.json\nrewrite:\n  c_extensions: [c, .i]\n"
        )

        config = load_config(tmp_path)

        assert config.compdb.filename == "cc.json"
        assert config.rewrite.c_extensions == [".c", ".i"]

    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".unvoid.yaml").write_text("logging:\n  level: INFO\n")
        monkeypatch.setenv("UNVOID__LOGGING__LEVEL", "ERROR")

        assert load_config(tmp_path).logging.level == "ERROR"

    def test_kwargs_beat_everything(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UNVOID__LOGGING__LEVEL", "ERROR")

        config = load_config(tmp_path, logging={"level": "DEBUG"})

        assert config.logging.level == "DEBUG"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / ".unvoid.yaml").write_text("compdb:\n  filename: build/cc.json\n")

        with pytest.raises(ConfigError) as exc:
            load_config(tmp_path)

        assert "compdb" in exc.value.details["field"]

    def test_explicit_config_path_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(config_path=tmp_path / "missing.yaml")

    def test_explicit_config_path_is_used(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("compdb:\n  filename: other.json\n")

        assert load_config(config_path=config_file).compdb.filename == "other.json"

"""Tests for localeflow_sync.config_loader: hierarchical config loading."""

import textwrap

import pytest
import yaml

from localeflow_sync.config_loader import (
    _interpolate_recursive,
    discover_config_files,
    ensure_config,
    interpolate_env_vars,
    load_hierarchical_config,
)
from localeflow_sync.errors import ConfigurationError


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point ``Path.home()`` at an empty directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


# -------------------------------------------------------------------------
# Env var interpolation
# -------------------------------------------------------------------------


class TestInterpolateEnvVars:
    def test_replaces_set_var(self, monkeypatch):
        monkeypatch.setenv("LF_HOST", "api.local")
        assert interpolate_env_vars("https://${LF_HOST}") == "https://api.local"

    def test_unset_var_replaced_with_empty(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert interpolate_env_vars("${UNSET_VAR_XYZ}") == ""

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert (
            interpolate_env_vars("${UNSET_VAR_XYZ:-fallback}") == "fallback"
        )

    def test_unclosed_left_alone(self):
        assert interpolate_env_vars("${OPEN") == "${OPEN"

    def test_recursive(self, monkeypatch):
        monkeypatch.setenv("LF_KEY", "k")
        data = {"api": {"api_key": "${LF_KEY}"}, "list": ["${LF_KEY}", 3]}
        assert _interpolate_recursive(data) == {
            "api": {"api_key": "k"},
            "list": ["k", 3],
        }


# -------------------------------------------------------------------------
# Discovery
# -------------------------------------------------------------------------


class TestDiscoverConfigFiles:
    def test_none_found(self, tmp_path, home):
        assert discover_config_files(tmp_path) == []

    def test_precedence_order(self, tmp_path, home, monkeypatch):
        explicit = tmp_path / "explicit.yml"
        explicit.write_text("project: a\n")
        project = tmp_path / ".localeflow" / "config.yml"
        project.parent.mkdir()
        project.write_text("project: b\n")
        legacy = tmp_path / "localeflow.config.yml"
        legacy.write_text("project: c\n")
        global_cfg = home / ".config" / "localeflow" / "config.yml"
        global_cfg.parent.mkdir(parents=True)
        global_cfg.write_text("project: d\n")
        monkeypatch.setenv("LOCALEFLOW_CONFIG", str(explicit))

        assert discover_config_files(tmp_path) == [
            explicit.resolve(),
            project,
            legacy,
            global_cfg,
        ]

    def test_missing_explicit_file_skipped(self, tmp_path, home, monkeypatch):
        monkeypatch.setenv("LOCALEFLOW_CONFIG", str(tmp_path / "nope.yml"))
        assert discover_config_files(tmp_path) == []


# -------------------------------------------------------------------------
# Loading
# -------------------------------------------------------------------------


class TestLoadHierarchicalConfig:
    def test_zero_config(self, tmp_path, home):
        assert load_hierarchical_config(tmp_path) == {}

    def test_project_wins(self, tmp_path, home):
        global_cfg = home / ".config" / "localeflow" / "config.yml"
        global_cfg.parent.mkdir(parents=True)
        global_cfg.write_text(
            textwrap.dedent(
                """\
                project: global
                default_space: shared
                format:
                  type: yaml
                """
            )
        )
        project = tmp_path / ".localeflow" / "config.yml"
        project.parent.mkdir()
        project.write_text("project: local\nformat:\n  nested: false\n")

        config = load_hierarchical_config(tmp_path)

        assert config["project"] == "local"
        assert config["default_space"] == "shared"
        # top-level keys replace, they do not deep-merge
        assert config["format"] == {"nested": False}

    def test_interpolates_after_merge(self, tmp_path, home, monkeypatch):
        monkeypatch.setenv("LF_TEST_KEY", "from-env")
        (tmp_path / "localeflow.config.yml").write_text(
            "api:\n  api_key: ${LF_TEST_KEY}\n"
        )
        config = load_hierarchical_config(tmp_path)
        assert config["api"]["api_key"] == "from-env"

    def test_non_dict_root_skipped(self, tmp_path, home):
        (tmp_path / "localeflow.config.yml").write_text("- a\n- b\n")
        assert load_hierarchical_config(tmp_path) == {}

    def test_invalid_yaml(self, tmp_path, home):
        (tmp_path / "localeflow.config.yml").write_text("project: [oops\n")
        with pytest.raises(ConfigurationError, match="not valid YAML"):
            load_hierarchical_config(tmp_path)


class TestEnsureConfig:
    def test_creates_starter(self, tmp_path):
        path, created = ensure_config(tmp_path)
        assert created is True
        assert path == tmp_path / ".localeflow" / "config.yml"
        data = yaml.safe_load(path.read_text())
        assert data["format"]["type"] == "json"
        assert data["pull"]["file_pattern"] == "{lang}.json"

    def test_never_overwrites(self, tmp_path):
        path = tmp_path / ".localeflow" / "config.yml"
        path.parent.mkdir()
        path.write_text("project: mine\n")
        _, created = ensure_config(tmp_path)
        assert created is False
        assert path.read_text() == "project: mine\n"

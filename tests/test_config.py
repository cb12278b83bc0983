"""
Tests for Configuration Loading
"""

import pytest
from pydantic import ValidationError

from src.utils.config import Config, _deep_merge, _resolve_env_vars, load_config


class TestResolveEnvVars:
    """Tests for environment variable substitution."""

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("NETWORK_GRAPH_TEST_DIR", raising=False)
        assert _resolve_env_vars("${NETWORK_GRAPH_TEST_DIR:-./outputs}") == "./outputs"

    def test_env_value_wins(self, monkeypatch):
        monkeypatch.setenv("NETWORK_GRAPH_TEST_DIR", "/tmp/reports")
        assert _resolve_env_vars({"dir": "${NETWORK_GRAPH_TEST_DIR:-./outputs}"}) == {
            "dir": "/tmp/reports"
        }

    def test_plain_values_untouched(self):
        assert _resolve_env_vars(["csv", 3, None]) == ["csv", 3, None]

    def test_embedded_reference(self, monkeypatch):
        monkeypatch.setenv("NETWORK_GRAPH_TEST_ROOT", "/data")
        assert _resolve_env_vars("${NETWORK_GRAPH_TEST_ROOT}/reports") == "/data/reports"

    def test_unset_without_default_kept(self, monkeypatch):
        monkeypatch.delenv("NETWORK_GRAPH_TEST_UNSET", raising=False)
        assert _resolve_env_vars("${NETWORK_GRAPH_TEST_UNSET}") == "${NETWORK_GRAPH_TEST_UNSET}"


class TestDeepMerge:
    """Tests for config merging."""

    def test_nested_override(self):
        base = {"graph": {"max_depth": 4, "max_paths": 5}, "logging": {"level": "INFO"}}
        override = {"graph": {"max_depth": 6}}

        merged = _deep_merge(base, override)

        assert merged == {"graph": {"max_depth": 6, "max_paths": 5}, "logging": {"level": "INFO"}}
        assert base["graph"]["max_depth"] == 4


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_files(self, tmp_path):
        config = load_config(tmp_path / "config.yaml")

        assert isinstance(config, Config)
        assert config.graph.max_depth == 4
        assert config.graph.candidate_cap == 500
        assert config.connectors.top_n == 10
        assert config.resolution.enabled is False

    def test_local_overrides(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "graph:\n  max_depth: 3\n  max_paths: 7\nconnectors:\n  workers: 2\n"
        )
        (tmp_path / "config.local.yaml").write_text("graph:\n  max_depth: 5\n")

        config = load_config(tmp_path / "config.yaml")

        assert config.graph.max_depth == 5
        assert config.graph.max_paths == 7
        assert config.connectors.workers == 2

    def test_project_config_loads(self):
        """Test the shipped config.yaml validates."""
        config = load_config()
        assert config.output.formats == ["csv", "markdown", "json"]
        assert config.metrics.path_length_sample == 50

    def test_invalid_bound_rejected(self, tmp_path):
        (tmp_path / "config.yaml").write_text("graph:\n  max_depth: -1\n")

        with pytest.raises(ValidationError):
            load_config(tmp_path / "config.yaml")

    def test_path_from_environment(self, tmp_path, monkeypatch):
        """Test NETWORK_GRAPH_CONFIG selects the main file."""
        config_file = tmp_path / "graph.yaml"
        config_file.write_text("connectors:\n  top_n: 3\n")
        monkeypatch.setenv("NETWORK_GRAPH_CONFIG", str(config_file))

        assert load_config().connectors.top_n == 3

    def test_markdown_section(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "output:\n  markdown:\n    include_methodology: false\n"
        )

        config = load_config(tmp_path / "config.yaml")

        assert config.output.markdown.include_methodology is False
        assert config.output.markdown.max_items_per_section == 20

    def test_non_mapping_rejected(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            load_config(tmp_path / "config.yaml")

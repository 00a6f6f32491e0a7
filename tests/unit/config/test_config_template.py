"""Unit tests for config_template module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.library.runtime.config.config_template import (
    load_templated_yaml,
    parse_config_text,
    substitute_env_vars,
)


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_env_var_in_text(self):
        with patch.dict(os.environ, {"HOST": "localhost", "PORT": "8080"}):
            text = "Server running at http://${HOST}:${PORT}/api"
            assert substitute_env_vars(text) == "Server running at http://localhost:8080/api"

    def test_substitute_env_var_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-default_value}") == "default_value"

    def test_default_ignored_when_set(self):
        with patch.dict(os.environ, {"PRESENT_VAR": "actual_value"}):
            assert substitute_env_vars("${PRESENT_VAR:-default_value}") == "actual_value"

    def test_substitute_required_env_var_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="MISSING_VAR not set"):
                substitute_env_vars("${MISSING_VAR}")

    def test_custom_error_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="needed for storage"):
                substitute_env_vars("${DB_URL:?needed for storage}")


class TestLoadTemplatedYaml:
    """Loading and validating config.yaml."""

    def test_load_with_substitution(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "config:\n"
            "  app:\n"
            "    port: ${TEST_PORT:-9000}\n"
            "    legacy_error_mapping: ${TEST_LEGACY:-false}\n"
            "  database:\n"
            "    url: ${TEST_DB_URL:-sqlite:///./test.db}\n"
        )

        with patch.dict(os.environ, {"TEST_LEGACY": "true"}):
            config = load_templated_yaml(path)

        assert config.app.port == 9000
        assert config.app.legacy_error_mapping is True
        assert config.database.url == "sqlite:///./test.db"
        assert config.logging.level == "INFO"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "absent.yaml")

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError, match="Invalid configuration"):
            parse_config_text("config:\n  app:\n    port: not-a-port\n")

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError, match="Failed to parse YAML"):
            parse_config_text("- just\n- a list\n")

    def test_empty_config_section_uses_defaults(self):
        config = parse_config_text("config:\n")

        assert config.database.url == "sqlite:///./library.db"

    def test_repository_config_file_loads(self):
        root = Path(__file__).resolve().parents[3]

        config = load_templated_yaml(root / "config.yaml")

        assert config.database.lock_timeout == 20

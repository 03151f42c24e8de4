"""Tests for configuration loading and the application context."""

from pathlib import Path

import pytest

from src.lingomate.api.utils.app_startup import validate_startup_config
from src.lingomate.core.errors import ConfigurationError
from src.lingomate.runtime.config.config_data import ConfigData
from src.lingomate.runtime.config.config_template import (
    load_templated_yaml,
    parse_config,
    substitute_env_vars,
)
from src.lingomate.runtime.context import get_config, with_context

PROJECT_CONFIG = Path(__file__).resolve().parents[3] / "config.yaml"


class TestSubstitution:
    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("LINGOMATE_TEST_VAR", raising=False)

        assert substitute_env_vars("x=${LINGOMATE_TEST_VAR:-fallback}") == "x=fallback"

    def test_environment_value_wins(self, monkeypatch):
        monkeypatch.setenv("LINGOMATE_TEST_VAR", "set")

        assert substitute_env_vars("${LINGOMATE_TEST_VAR:-fallback}") == "set"

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("LINGOMATE_TEST_VAR", raising=False)

        with pytest.raises(ValueError):
            substitute_env_vars("${LINGOMATE_TEST_VAR}")
        with pytest.raises(ValueError, match="needed for tests"):
            substitute_env_vars("${LINGOMATE_TEST_VAR:?needed for tests}")


class TestParseConfig:
    def test_values_under_config_key(self, monkeypatch):
        monkeypatch.setenv("SESSION_SIGNING_SECRET", "from-env")
        content = """
config:
  app:
    session_signing_secret: "${SESSION_SIGNING_SECRET:-}"
    port: 8080
  chat:
    api_key: "k"
"""
        config = parse_config(content)

        assert config.app.session_signing_secret == "from-env"
        assert config.app.port == 8080
        assert config.chat.api_key == "k"
        assert config.security.session_cookie_name == "jwt"

    def test_empty_document_gives_defaults(self):
        assert parse_config("") == ConfigData()

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError):
            parse_config("config:\n  app:\n    environment: staging\n")

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError):
            parse_config("- just\n- a list\n")

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_templated_yaml(tmp_path / "absent.yaml") == ConfigData()

    def test_project_config_loads(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "development")
        monkeypatch.delenv("SESSION_SIGNING_SECRET", raising=False)
        monkeypatch.delenv("PORT", raising=False)

        config = load_templated_yaml(PROJECT_CONFIG)

        assert config.app.port == 5001
        assert config.security.cookie_samesite == "strict"
        assert not config.app.session_signing_secret


class TestContext:
    def test_with_context_merges_partial_override(self):
        original = get_config()

        with with_context({"app": {"session_max_age": 60}}):
            assert get_config().app.session_max_age == 60
            assert get_config().jwt == original.jwt

        assert get_config() == original

    def test_with_context_replaces_whole_config(self):
        replacement = ConfigData.model_validate({"app": {"port": 9999}})

        with with_context(replacement):
            assert get_config() is replacement

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError):
            with with_context("nope"):  # type: ignore[arg-type]
                pass


class TestStartupValidation:
    def test_complete_config_passes(self, test_config):
        validate_startup_config(test_config)

    def test_reports_every_missing_secret(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_startup_config(ConfigData())

        missing = exc_info.value.details["missing"]
        assert len(missing) == 3
        assert any("SESSION_SIGNING_SECRET" in item for item in missing)
        assert any("STREAM_API_KEY" in item for item in missing)
        assert any("STREAM_API_SECRET" in item for item in missing)

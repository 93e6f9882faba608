"""Unit tests for mock server configuration."""

import json

import pytest
from pydantic import ValidationError

from patient_intake.mock_server.config import (
    CreatePatientBehavior,
    MockServerConfig,
    ResponseMode,
    load_config,
)


class TestMockServerConfig:
    """Tests for MockServerConfig model."""

    def test_default_config_values(self):
        """Test that default configuration values are set correctly."""
        config = MockServerConfig()

        assert config.host == "127.0.0.1"
        assert config.http_port == 8080
        assert config.log_level == "INFO"
        assert config.create_patient.status_code == 200
        assert config.create_patient.response_mode == ResponseMode.JSON
        assert config.create_patient.validate_payload is True

    def test_invalid_port(self):
        with pytest.raises(ValidationError, match="Invalid port"):
            MockServerConfig(http_port=70000)

    def test_log_level_normalized(self):
        assert MockServerConfig(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "kwargs",
        [{"response_delay_ms": 5001}, {"response_delay_ms": -1}, {"status_code": 199}, {"status_code": 600}],
    )
    def test_behavior_bounds(self, kwargs):
        with pytest.raises(ValidationError):
            CreatePatientBehavior(**kwargs)


class TestLoadConfig:
    """Tests for mock config loading."""

    def test_load_from_file(self, tmp_path):
        """Test nested behavior is read from JSON."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "http_port": 9090,
            "create_patient": {"status_code": 503, "response_mode": "empty"},
        }))

        config = load_config(config_file)

        assert config.http_port == 9090
        assert config.create_patient.status_code == 503
        assert config.create_patient.response_mode == ResponseMode.EMPTY

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken")

        with pytest.raises(ValueError, match="Failed to parse"):
            load_config(config_file)

    def test_env_overrides(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")
        monkeypatch.setenv("MOCK_SERVER_HTTP_PORT", "9191")
        monkeypatch.setenv("MOCK_SERVER_LOG_LEVEL", "warning")

        config = load_config(config_file)

        assert config.http_port == 9191
        assert config.log_level == "WARNING"

    def test_env_port_not_integer(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")
        monkeypatch.setenv("MOCK_SERVER_HTTP_PORT", "eighty")

        with pytest.raises(ValueError, match="MOCK_SERVER_HTTP_PORT"):
            load_config(config_file)

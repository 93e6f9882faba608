"""Configuration management for the mock records API server."""

import json
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class ResponseMode(str, Enum):
    """Shape of a successful CreatePatient response."""

    JSON = "json"
    EMPTY = "empty"
    TEXT = "text"


class CreatePatientBehavior(BaseModel):
    """CreatePatient endpoint behavior configuration.

    Attributes:
        response_delay_ms: Response delay in milliseconds (0-5000)
        status_code: Forced HTTP status; 4xx/5xx return failure_body
        failure_body: Body text returned with a forced failure status
        response_mode: Success body shape (json, empty or text)
        validate_payload: Reject incomplete records with 422
    """

    response_delay_ms: int = Field(
        default=0,
        ge=0,
        le=5000,
        description="Response delay in milliseconds",
    )
    status_code: int = Field(
        default=200,
        ge=200,
        le=599,
        description="HTTP status returned by the endpoint",
    )
    failure_body: str = Field(
        default="Internal error",
        description="Body returned with a failure status",
    )
    response_mode: ResponseMode = Field(
        default=ResponseMode.JSON,
        description="Success body shape",
    )
    validate_payload: bool = Field(
        default=True,
        description="Reject incomplete records with 422",
    )


class MockServerConfig(BaseModel):
    """Mock server configuration model.

    Configuration precedence:
    1. Environment variables (MOCK_SERVER_* prefix)
    2. JSON config file
    3. Default values
    """

    host: str = Field(default="127.0.0.1", description="Server host address")
    http_port: int = Field(default=8080, description="HTTP server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_path: str = Field(default="mocks/logs/mock-server.log", description="Log file path")
    create_patient: CreatePatientBehavior = Field(
        default_factory=CreatePatientBehavior,
        description="CreatePatient endpoint behavior configuration",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper

    @field_validator("http_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Invalid port {v}. Must be between 1 and 65535.")
        return v


DEFAULT_MOCK_CONFIG_PATH = Path("mocks/config.json")


def load_config(config_file: Path | None = None) -> MockServerConfig:
    """Load mock server configuration from file and environment variables.

    Args:
        config_file: Path to configuration JSON file. Defaults to mocks/config.json

    Returns:
        MockServerConfig instance with merged configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = DEFAULT_MOCK_CONFIG_PATH

    config_data = {}
    if config_file.exists():
        try:
            with open(config_file, encoding="utf-8") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Failed to parse configuration file '{config_file}': {e}. "
                f"Ensure the file contains valid JSON."
            ) from e
    elif config_file != DEFAULT_MOCK_CONFIG_PATH:
        raise FileNotFoundError(
            f"Configuration file not found: '{config_file}'. "
            f"Ensure the file exists or check the path."
        )

    env_prefix = "MOCK_SERVER_"
    for key in ("host", "http_port", "log_level", "log_path"):
        env_key = f"{env_prefix}{key.upper()}"
        if env_key in os.environ:
            value = os.environ[env_key]
            if key == "http_port":
                try:
                    value = int(value)
                except ValueError as e:
                    raise ValueError(
                        f"Invalid value for {env_key}: '{value}'. Must be an integer."
                    ) from e
            config_data[key] = value

    try:
        return MockServerConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e

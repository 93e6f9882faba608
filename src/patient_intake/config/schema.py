"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class EndpointsConfig(BaseModel):
    """Configuration for the records API endpoint.

    Attributes:
        create_patient_url: Record-creation (CreatePatient) endpoint URL
    """

    create_patient_url: str = Field(..., description="CreatePatient endpoint URL")

    @field_validator("create_patient_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL is valid HTTP/HTTPS.

        Args:
            v: URL string to validate

        Returns:
            Validated URL string

        Raises:
            ValueError: If URL does not start with http:// or https://
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid URL: {v}. Must start with http:// or https://"
            )
        return v


class TransportConfig(BaseModel):
    """Configuration for HTTP/HTTPS transport and the retry policy.

    Attributes:
        verify_tls: Whether to verify TLS certificates
        timeout: Per-attempt timeout in seconds
        max_attempts: Total HTTP attempts per submission (first try included)
        backoff_base: Delay in seconds before the second attempt; doubles
            for every later attempt
    """

    verify_tls: bool = True
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-attempt timeout in seconds"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Total attempts per submission"
    )
    backoff_base: float = Field(
        default=1.0,
        ge=0.0,
        description="Exponential backoff base delay in seconds"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact PII from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/patient-intake.log"),
        description="Log file path"
    )
    redact_pii: bool = Field(
        default=True,
        description="Redact PII from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Raises:
            ValueError: If log level is not valid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        endpoints: Records API endpoint configuration
        transport: HTTP/HTTPS transport and retry configuration
        logging: Logging configuration

    Example:
        >>> config = Config(
        ...     endpoints=EndpointsConfig(
        ...         create_patient_url="http://localhost:8080/api/Users/v1/CreatePatient"
        ...     ),
        ...     transport=TransportConfig(max_attempts=5)
        ... )
        >>> config.transport.max_attempts
        5
    """

    endpoints: EndpointsConfig
    transport: TransportConfig = TransportConfig()
    logging: LoggingConfig = LoggingConfig()

"""Config module.

This module provides configuration management functionality.
"""

from patient_intake.config.manager import (
    get_endpoint,
    get_logging_config,
    get_transport_config,
    load_config,
)
from patient_intake.config.schema import (
    Config,
    EndpointsConfig,
    LoggingConfig,
    TransportConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_endpoint",
    "get_transport_config",
    "get_logging_config",
    # Configuration models
    "Config",
    "EndpointsConfig",
    "TransportConfig",
    "LoggingConfig",
]

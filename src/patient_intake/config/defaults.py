"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "endpoints": {
        # Local mock records API (patient-intake mock start)
        "create_patient_url": "http://localhost:8080/api/Users/v1/CreatePatient",
    },
    "transport": {
        "verify_tls": True,
        # Each attempt is bounded independently
        "timeout": 30.0,
        "max_attempts": 3,
        # 1s before attempt 2, 2s before attempt 3
        "backoff_base": 1.0,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/patient-intake.log",
        # Registration payloads always carry SSNs
        "redact_pii": True,
    },
}

DEFAULT_CONFIG_PATH = "config/config.json"

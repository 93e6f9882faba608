"""Audit trail functionality for Patient Intake.

This module provides structured audit logging for tracking registration
submissions and their outcomes.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

# Key fields emitted first, in this order
FIELD_ORDER = [
    "status",
    "endpoint",
    "attempts",
    "duration",
    "is_network_error",
    "missing_fields",
    "error_message",
    "correlation_id",
]


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log an audit trail event.

    Creates a structured audit log entry with standard fields. Audit events are
    logged at INFO level for successful operations and ERROR level for failures.
    The caller's dict is not modified.

    Args:
        event_type: Type of operation (e.g., "PATIENT_SUBMITTED",
                   "PATIENT_VALIDATION_FAILED", "PATIENT_SUBMISSION_FAILED")
        details: Dictionary with event details. Common fields include:
                - status: "success" or "failure"
                - endpoint: Records API URL
                - attempts: Number of HTTP attempts made
                - duration: Operation duration in seconds
                - error_message: Error details (if status is failure)
                - correlation_id: Optional correlation ID for tracking related events

    Example:
        >>> log_audit_event("PATIENT_SUBMITTED", {
        ...     "status": "success",
        ...     "endpoint": "https://records.example.com/CreatePatient",
        ...     "attempts": 1,
        ...     "duration": 0.42
        ... })
    """
    details = dict(details)
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]

    for field in FIELD_ORDER:
        if field in details:
            value = details[field]
            if field == "duration" and isinstance(value, (int, float)):
                message_parts.append(f"{field}={value:.2f}s")
            else:
                message_parts.append(f"{field}={value}")

    for key, value in details.items():
        if key not in FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)


def log_transaction(
    transaction_type: str,
    request: str,
    response: str,
    status: str = "success",
) -> None:
    """Log a complete HTTP exchange with request and response bodies.

    The header line goes to INFO; full bodies go to DEBUG so they land in the
    file handler only.

    Args:
        transaction_type: Type of transaction (e.g., "CREATE_PATIENT")
        request: Request body
        response: Response body
        status: Transaction status ("success" or "failure")
    """
    correlation_id = str(uuid.uuid4())

    logger.info(
        f"TRANSACTION [{transaction_type}] | "
        f"status={status} | "
        f"correlation_id={correlation_id} | "
        f"request_size={len(request)} bytes | "
        f"response_size={len(response)} bytes"
    )

    logger.debug(
        f"TRANSACTION REQUEST [{transaction_type}] | "
        f"correlation_id={correlation_id}\n"
        f"{request}"
    )

    logger.debug(
        f"TRANSACTION RESPONSE [{transaction_type}] | "
        f"correlation_id={correlation_id}\n"
        f"{response}"
    )

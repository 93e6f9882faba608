"""Custom log formatters for Patient Intake.

This module provides specialized formatters for logging, including PII redaction.
"""

import logging
import re
from dataclasses import fields
from typing import List, Tuple

from patient_intake.models.patient import Address, PatientInformation

# Redaction label per wire field; fields not listed fall back to PII-REDACTED
FIELD_LABELS = {
    "FirstName": "NAME",
    "LastName": "NAME",
    "DateOfBirth": "DOB",
    "SSN": "SSN",
    "EmailID": "EMAIL",
    "PhoneNumber": "PHONE",
    "AddressLine1": "ADDRESS",
    "City": "ADDRESS",
    "ZipCode": "ADDRESS",
}


def patient_wire_names() -> list[str]:
    """Return every PatientInformation and Address wire field name."""
    return [
        f.metadata["wire_name"]
        for section in (PatientInformation, Address)
        for f in fields(section)
    ]


def _wire_field_patterns() -> List[Tuple[re.Pattern[str], str]]:
    patterns = []
    for wire_name in patient_wire_names():
        label = FIELD_LABELS.get(wire_name, "PII")
        patterns.append((
            re.compile(rf'"{wire_name}":\s*"(?:[^"\\]|\\.)*"'),
            f'"{wire_name}": "[{label}-REDACTED]"',
        ))
    return patterns


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that redacts patient data from log messages.

    Serialized registration records are masked field by field, using the wire
    names declared on PatientInformation and Address, so every value in a
    logged request body is replaced. Free-text SSNs (with or without dashes),
    email addresses and labelled names are masked as well.

    Attributes:
        redact_pii: Whether to enable PII redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = PIIRedactingFormatter(redact_pii=True)
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_pii: bool = False,
    ) -> None:
        """Initialize the PIIRedactingFormatter.

        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_pii: Whether to enable PII redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_pii = redact_pii

        # Structured fields first so their labels survive the free-text passes
        self.patterns: List[Tuple[re.Pattern[str], str]] = _wire_field_patterns() + [
            (re.compile(r'\b\d{3}-\d{2}-\d{4}\b'), '[SSN-REDACTED]'),
            (re.compile(r'\b\d{9}\b'), '[SSN-REDACTED]'),
            (re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}'),
             '[EMAIL-REDACTED]'),
            (re.compile(r'(Patient|Name):\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)'),
             r'\1: [NAME-REDACTED]'),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional PII redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with PII redacted if enabled
        """
        message = super().format(record)

        if self.redact_pii:
            for pattern, replacement in self.patterns:
                message = pattern.sub(replacement, message)

        return message

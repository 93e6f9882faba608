"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import copy
import importlib
import logging
from pathlib import Path
from typing import Any

import pytest

from patient_intake.config.schema import Config, EndpointsConfig, TransportConfig
from patient_intake.models.patient import PatientRecord


COMPLETE_RECORD: dict[str, dict[str, str]] = {
    "PatientInformation": {
        "FirstName": "Jane",
        "LastName": "Doe",
        "DateOfBirth": "September 7, 1996",
        "SSN": "123-45-6789",
        "EmailID": "jane.doe@example.com",
        "MaritalStatus": "Single",
        "PhoneNumber": "+1 512-555-0147",
    },
    "Address": {
        "Type": "Home",
        "AddressLine1": "742 Evergreen Terrace",
        "City": "Austin",
        "State": "TX",
        "Country": "USA",
        "ZipCode": "78701",
    },
}


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def complete_record_dict() -> dict[str, Any]:
    """
    Return a complete patient record in the records-API wire shape.

    Returns:
        dict: Deep copy, safe to mutate per test.
    """
    return copy.deepcopy(COMPLETE_RECORD)


@pytest.fixture
def complete_record(complete_record_dict: dict[str, Any]) -> PatientRecord:
    """Return a complete PatientRecord."""
    return PatientRecord.from_dict(complete_record_dict)


@pytest.fixture
def test_config() -> Config:
    """Return configuration pointing at an HTTPS records API."""
    return Config(
        endpoints=EndpointsConfig(
            create_patient_url="https://records.example.com/api/Users/v1/CreatePatient"
        ),
        transport=TransportConfig(
            verify_tls=True,
            timeout=30.0,
            max_attempts=3,
            backoff_base=1.0,
        ),
    )


@pytest.fixture(autouse=True)
def isolate_root_logging(monkeypatch):
    """Drop handlers added by configure_logging once a test finishes."""
    logger_module = importlib.import_module("patient_intake.logging_audit.logger")
    monkeypatch.setattr(logger_module, "_logging_configured", False)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level

    yield

    for handler in list(root.handlers):
        if handler not in original_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(original_level)

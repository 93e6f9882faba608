"""Models module.

This module provides data models and dataclasses for the application.
"""

from patient_intake.models.outcomes import (
    OutcomeKind,
    SubmissionFailed,
    SubmissionOutcome,
    Submitted,
    ValidationFailed,
)
from patient_intake.models.patient import Address, PatientInformation, PatientRecord

__all__ = [
    "Address",
    "OutcomeKind",
    "PatientInformation",
    "PatientRecord",
    "SubmissionFailed",
    "SubmissionOutcome",
    "Submitted",
    "ValidationFailed",
]

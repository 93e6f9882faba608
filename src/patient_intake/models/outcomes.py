"""Submission outcome data models.

This module defines the tagged result returned by the submission client. Every
outcome serializes to the caller-facing shape
``{success, error?, isNetworkError?, response?}`` relayed by the dialogue layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class OutcomeKind(Enum):
    """Submission outcome variants."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    SUBMITTED = "SUBMITTED"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"


@dataclass(frozen=True)
class ValidationFailed:
    """Record was incomplete; no network call was made.

    Attributes:
        missing_fields: Dotted field paths in declaration order
    """

    missing_fields: tuple[str, ...]

    kind = OutcomeKind.VALIDATION_FAILED
    success = False

    @property
    def message(self) -> str:
        return f"Missing required fields: {', '.join(self.missing_fields)}"

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.message}


@dataclass(frozen=True)
class Submitted:
    """Records API accepted the registration.

    Attributes:
        response_body: Parsed JSON body, or {"success": True} when the API
            returned an empty or non-JSON body
    """

    response_body: Any

    kind = OutcomeKind.SUBMITTED
    success = True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "response": self.response_body}


@dataclass(frozen=True)
class SubmissionFailed:
    """Delivery failed after validation passed.

    Attributes:
        message: Diagnostic text (includes HTTP status and body when available)
        is_network_error: True when the failure was a transient network error
            that exhausted all attempts
        attempts: Number of HTTP attempts made
    """

    message: str
    is_network_error: bool
    attempts: int = 1

    kind = OutcomeKind.SUBMISSION_FAILED
    success = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "isNetworkError": self.is_network_error,
        }


SubmissionOutcome = Union[ValidationFailed, Submitted, SubmissionFailed]

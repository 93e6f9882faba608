"""Custom exception classes and error classification for Patient Intake.

All exceptions inherit from PatientIntakeError to allow catching all custom exceptions.
Network-vs-application classification for the submission pipeline lives here as
well, so every caller reads the same signature table.
"""

from enum import Enum

import requests


class PatientIntakeError(Exception):
    """Base exception for all Patient Intake custom exceptions."""

    pass


class ValidationError(PatientIntakeError):
    """Raised when data or argument validation fails.

    Examples:
        - Invalid client arguments (timeout, attempt count, endpoint URL)
        - Patient record file that is not a JSON object
    """

    pass


class ConfigurationError(PatientIntakeError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Malformed configuration JSON
        - Configuration value out of range
    """

    pass


class SubmissionError(PatientIntakeError):
    """Raised while handling a record-creation response.

    Examples:
        - Non-success HTTP status from the records API
        - Success response whose JSON body cannot be parsed
    """

    pass


class SubmissionStateError(PatientIntakeError):
    """Raised when a registration is submitted more than once."""

    pass


class ErrorCategory(Enum):
    """Error categorization for retry strategy.

    Attributes:
        TRANSIENT: Connectivity/timeout failure, retry with exponential backoff
        TERMINAL: Application failure, abort the retry loop immediately

    Example:
        >>> category = classify_error(requests.ConnectionError("Connection refused"))
        >>> category == ErrorCategory.TRANSIENT
        True
    """

    TRANSIENT = "TRANSIENT"
    TERMINAL = "TERMINAL"


# Case-insensitive substrings that mark an error message as a network failure.
NETWORK_ERROR_SIGNATURES: tuple[str, ...] = (
    "failed to fetch",
    "network error",
    "networkerror when attempting to fetch resource",
    "load failed",
    "connection failed",
    "connection refused",
    "econnrefused",
    "enotfound",
    "etimedout",
    "name or service not known",
    "temporary failure in name resolution",
    "timed out",
)


def classify_error_message(message: str) -> ErrorCategory:
    """Classify an error description against the network signature table.

    Args:
        message: Error message text

    Returns:
        ErrorCategory.TRANSIENT if any signature matches, else TERMINAL

    Example:
        >>> classify_error_message("ECONNREFUSED 127.0.0.1:8443")
        <ErrorCategory.TRANSIENT: 'TRANSIENT'>
        >>> classify_error_message("Expecting value: line 1 column 1")
        <ErrorCategory.TERMINAL: 'TERMINAL'>
    """
    lowered = message.lower()
    if any(signature in lowered for signature in NETWORK_ERROR_SIGNATURES):
        return ErrorCategory.TRANSIENT
    return ErrorCategory.TERMINAL


def classify_error(exception: BaseException) -> ErrorCategory:
    """Categorize an exception raised during a submission attempt.

    requests exception types are checked first; anything else falls back to
    the message signature table.

    Args:
        exception: The exception to categorize

    Returns:
        ErrorCategory indicating whether the attempt may be retried

    Example:
        >>> classify_error(requests.Timeout("Read timed out"))
        <ErrorCategory.TRANSIENT: 'TRANSIENT'>
        >>> classify_error(ValueError("bad payload"))
        <ErrorCategory.TERMINAL: 'TERMINAL'>
    """
    # SSLError inherits from ConnectionError, check it first
    if isinstance(exception, requests.exceptions.SSLError):
        return ErrorCategory.TERMINAL

    if isinstance(exception, (requests.Timeout, requests.ConnectionError)):
        return ErrorCategory.TRANSIENT

    if isinstance(exception, SubmissionError):
        return ErrorCategory.TERMINAL

    return classify_error_message(str(exception))


def is_network_error(exception: BaseException) -> bool:
    """Return True when the exception is a transient network failure."""
    return classify_error(exception) == ErrorCategory.TRANSIENT


def remediation_hint(is_network_error: bool, missing_fields: bool = False) -> str:
    """Generate an actionable remediation message for a failed submission.

    Args:
        is_network_error: Whether the failure was classified as network-related
        missing_fields: Whether the failure was a completeness check

    Returns:
        Remediation text suitable for CLI output
    """
    if missing_fields:
        return (
            "Record is incomplete. Supply every PatientInformation and Address "
            "field before submitting."
        )

    if is_network_error:
        return (
            "Cannot reach the records API. Check: 1) Network connectivity, "
            "2) endpoints.create_patient_url in config.json, 3) Endpoint is running."
        )

    return (
        "The records API rejected the request. Review the error message and "
        "check the log file for the complete response."
    )

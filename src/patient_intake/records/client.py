"""Records API client for patient registration submissions.

This module submits completed patient records to the remote CreatePatient
endpoint. Incomplete records are rejected before any I/O; complete records are
POSTed with a bounded number of attempts, a per-attempt timeout, and
exponential backoff between attempts that failed with a network error.
Every failure is converted into a SubmissionOutcome, nothing is raised to
the caller.
"""

import json
import logging
import time
from typing import Any, Optional

import requests

from patient_intake.config.schema import Config
from patient_intake.logging_audit import log_audit_event, log_transaction
from patient_intake.models.outcomes import (
    SubmissionFailed,
    SubmissionOutcome,
    Submitted,
    ValidationFailed,
)
from patient_intake.models.patient import PatientRecord
from patient_intake.transport.http_client import DEFAULT_HEADERS, create_session
from patient_intake.utils.exceptions import (
    ErrorCategory,
    SubmissionError,
    ValidationError,
    classify_error,
)
from patient_intake.validation.validator import validate_patient_record

logger = logging.getLogger(__name__)

# Result used when the API accepts the record without a JSON body
MINIMAL_SUCCESS = {"success": True}

READ_CHUNK_SIZE = 1


class PatientRecordClient:
    """Client for the records API CreatePatient endpoint.

    Stateless per call: each submit() owns its own attempt counter, so a single
    client may be reused for successive registrations. The caller is
    responsible for invoking submit() at most once per confirmed record (see
    RegistrationSubmission).

    Attributes:
        config: Application configuration
        endpoint_url: CreatePatient endpoint URL
        timeout: Per-attempt timeout in seconds
        max_attempts: Total HTTP attempts per submission
        backoff_base: Delay before the second attempt in seconds
        session: requests session with TLS enforcement

    Example:
        >>> from patient_intake.config import load_config
        >>> with PatientRecordClient(load_config()) as client:
        ...     outcome = client.submit(record)
        >>> outcome.to_dict()
        {'success': True, 'response': {'success': True}}
    """

    def __init__(
        self,
        config: Config,
        endpoint_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_base: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the records API client.

        Args:
            config: Application configuration with endpoint URL and transport
            endpoint_url: Override endpoint URL (uses config if not provided)
            timeout: Override per-attempt timeout in seconds
            max_attempts: Override total attempts
            backoff_base: Override backoff base delay in seconds
            session: Pre-built session (created from config if not provided)

        Raises:
            ValidationError: If timeout <= 0, max_attempts < 1, backoff_base < 0
                or the endpoint URL is not HTTP/HTTPS
        """
        transport = config.transport
        self.config = config
        self.endpoint_url = endpoint_url or config.endpoints.create_patient_url
        self.timeout = transport.timeout if timeout is None else timeout
        self.max_attempts = (
            transport.max_attempts if max_attempts is None else max_attempts
        )
        self.backoff_base = (
            transport.backoff_base if backoff_base is None else backoff_base
        )

        if self.timeout <= 0:
            raise ValidationError(
                f"Invalid timeout: {self.timeout}. Must be greater than 0 seconds."
            )

        if self.max_attempts < 1:
            raise ValidationError(
                f"Invalid max_attempts: {self.max_attempts}. Must be >= 1."
            )

        if self.backoff_base < 0:
            raise ValidationError(
                f"Invalid backoff_base: {self.backoff_base}. Must be >= 0."
            )

        if not self.endpoint_url.startswith(("http://", "https://")):
            raise ValidationError(
                f"Invalid endpoint URL: {self.endpoint_url}. "
                "Must start with http:// or https://"
            )

        if self.endpoint_url.startswith("http://"):
            logger.warning(
                "SECURITY WARNING: Using HTTP transport (not HTTPS) for the records API. "
                "Patient data including SSNs will be sent unencrypted. "
                "This is only acceptable for local development."
            )

        self.session = session or create_session(verify_tls=transport.verify_tls)

        logger.info(
            f"Records API client initialized: endpoint={self.endpoint_url}, "
            f"timeout={self.timeout}s, max_attempts={self.max_attempts}"
        )

    def submit(self, record: PatientRecord) -> SubmissionOutcome:
        """Validate and submit a patient record.

        Args:
            record: Fully assembled, caller-confirmed patient record

        Returns:
            ValidationFailed if any field is blank (no network call made),
            Submitted on a 2xx response, SubmissionFailed otherwise
        """
        start_time = time.time()

        missing_fields = validate_patient_record(record)
        if missing_fields:
            logger.warning(
                f"Patient record incomplete, not submitting: {', '.join(missing_fields)}"
            )
            log_audit_event("PATIENT_VALIDATION_FAILED", {
                "status": "failure",
                "missing_fields": ", ".join(missing_fields),
            })
            return ValidationFailed(missing_fields=tuple(missing_fields))

        body = json.dumps(record.to_dict())
        logger.debug(f"Saving patient data to {self.endpoint_url} ({len(body)} bytes)")

        outcome, attempts = self._submit_with_retry(body)
        duration = time.time() - start_time

        if isinstance(outcome, Submitted):
            logger.info(
                f"Patient data saved successfully after {attempts} attempt(s) "
                f"in {duration:.2f}s"
            )
            log_audit_event("PATIENT_SUBMITTED", {
                "status": "success",
                "endpoint": self.endpoint_url,
                "attempts": attempts,
                "duration": duration,
            })
        else:
            logger.error(f"Error saving patient data: {outcome.message}")
            log_audit_event("PATIENT_SUBMISSION_FAILED", {
                "status": "failure",
                "endpoint": self.endpoint_url,
                "attempts": attempts,
                "duration": duration,
                "is_network_error": outcome.is_network_error,
                "error_message": outcome.message,
            })

        return outcome

    def backoff_delay(self, attempt: int) -> float:
        """Return the sleep before the attempt following ``attempt``.

        Args:
            attempt: 1-based number of the attempt that just failed

        Returns:
            backoff_base * 2 ** (attempt - 1) seconds
        """
        return self.backoff_base * (2 ** (attempt - 1))

    def _submit_with_retry(self, body: str) -> tuple[SubmissionOutcome, int]:
        """POST the body, retrying transient network failures.

        Args:
            body: JSON-serialized patient record

        Returns:
            Tuple of (outcome, attempts made)
        """
        for attempt in range(1, self.max_attempts + 1):
            logger.debug(f"CreatePatient attempt {attempt}/{self.max_attempts}")

            try:
                response_body = self._attempt(body)
                return Submitted(response_body=response_body), attempt

            except Exception as e:
                message = str(e) or type(e).__name__
                logger.warning(f"Attempt {attempt} failed: {message}")

                if classify_error(e) == ErrorCategory.TERMINAL:
                    return SubmissionFailed(
                        message=message, is_network_error=False, attempts=attempt
                    ), attempt

                if attempt == self.max_attempts:
                    logger.error(
                        f"Could not reach records API at {self.endpoint_url} "
                        f"after {self.max_attempts} attempts. "
                        f"Check network connectivity and endpoint URL."
                    )
                    return SubmissionFailed(
                        message=message, is_network_error=True, attempts=attempt
                    ), attempt

                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"Network error on attempt {attempt}/{self.max_attempts}. "
                    f"Retrying after {delay}s delay."
                )
                time.sleep(delay)

        raise RuntimeError("Retry logic error - should not reach this point")

    def _attempt(self, body: str) -> Any:
        """Perform one HTTP request/response cycle.

        The whole cycle, body included, must finish within ``self.timeout``
        seconds. The response is used as a context manager so its connection is
        released on every exit path.

        Args:
            body: JSON-serialized patient record

        Returns:
            Parsed success body

        Raises:
            SubmissionError: On a non-2xx status or an unparseable JSON body
            requests.RequestException: On connection, DNS, TLS or timeout failures
        """
        deadline = time.monotonic() + self.timeout

        with self.session.post(
            self.endpoint_url,
            data=body.encode("utf-8"),
            headers=DEFAULT_HEADERS,
            timeout=self.timeout,
            stream=True,
        ) as response:
            text = self._read_body(response, deadline)
            status = "success" if 200 <= response.status_code < 300 else "failure"
            log_transaction("CREATE_PATIENT", body, text, status=status)

            if status == "failure":
                raise SubmissionError(
                    f"API responded with {response.status_code}: {text or 'No details'}"
                )

            return self._parse_success_body(response, text)

    def _read_body(self, response: requests.Response, deadline: float) -> str:
        """Read the response body, aborting once the attempt deadline passes.

        The socket read timeout only bounds the gap between reads, so a server
        trickling bytes could otherwise hold the attempt open indefinitely.

        Args:
            response: Streamed HTTP response
            deadline: time.monotonic() value the attempt must finish by

        Returns:
            Decoded body text

        Raises:
            requests.Timeout: If the body is not complete by the deadline
        """
        chunks = []
        # Single-byte reads return as soon as data arrives
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            chunks.append(chunk)
            if time.monotonic() > deadline:
                response.close()
                raise requests.Timeout(
                    f"CreatePatient attempt timed out after {self.timeout}s "
                    f"while reading the response body"
                )

        return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")

    def _parse_success_body(self, response: requests.Response, text: str) -> Any:
        """Extract the remote result from a 2xx response.

        Args:
            response: HTTP response
            text: Response body text

        Returns:
            Parsed JSON when the content type is JSON and the body is non-blank,
            otherwise the minimal success marker

        Raises:
            SubmissionError: If a JSON content type carries invalid JSON
        """
        content_type = response.headers.get("Content-Type") or ""
        if "application/json" not in content_type.lower():
            return dict(MINIMAL_SUCCESS)

        if not text.strip():
            return dict(MINIMAL_SUCCESS)

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise SubmissionError(
                f"Invalid JSON in records API response: {e}"
            ) from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self) -> "PatientRecordClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

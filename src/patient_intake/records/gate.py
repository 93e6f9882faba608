"""Submit-once gate for a confirmed registration.

The records client has no deduplication of its own. A dialogue driver wraps
each confirmed record in a RegistrationSubmission so the record reaches the
records API at most once.
"""

import logging
from enum import Enum
from threading import Lock
from typing import Optional

from patient_intake.models.outcomes import (
    SubmissionOutcome,
    Submitted,
    ValidationFailed,
)
from patient_intake.models.patient import PatientRecord
from patient_intake.records.client import PatientRecordClient
from patient_intake.utils.exceptions import SubmissionStateError

logger = logging.getLogger(__name__)


class SubmissionState(Enum):
    """Lifecycle of one registration submission."""

    UNSUBMITTED = "UNSUBMITTED"
    SUBMITTING = "SUBMITTING"
    SUBMITTED = "SUBMITTED"
    FAILED = "FAILED"


class RegistrationSubmission:
    """Single-use submission token for one confirmed patient record.

    Transitions: UNSUBMITTED -> SUBMITTING -> SUBMITTED | FAILED. An incomplete
    record never leaves the client, so a ValidationFailed outcome returns the
    gate to UNSUBMITTED; the caller collects the missing fields and builds a
    new gate for the corrected record.

    Attributes:
        record: The confirmed patient record
        client: Records API client used for delivery
        state: Current SubmissionState
        outcome: Last outcome, None until submit() returns

    Example:
        >>> gate = RegistrationSubmission(record, client)
        >>> outcome = gate.submit()
        >>> gate.submit()
        Traceback (most recent call last):
        ...
        SubmissionStateError: Registration already submitted (state=SUBMITTED)
    """

    def __init__(self, record: PatientRecord, client: PatientRecordClient) -> None:
        self.record = record
        self.client = client
        self.state = SubmissionState.UNSUBMITTED
        self.outcome: Optional[SubmissionOutcome] = None
        self._lock = Lock()

    @property
    def is_final(self) -> bool:
        return self.state in (SubmissionState.SUBMITTED, SubmissionState.FAILED)

    def submit(self) -> SubmissionOutcome:
        """Submit the record once.

        Returns:
            Outcome from the records client

        Raises:
            SubmissionStateError: If a submission is in flight or already finished
        """
        with self._lock:
            if self.state != SubmissionState.UNSUBMITTED:
                raise SubmissionStateError(
                    f"Registration already submitted (state={self.state.value})"
                )
            self.state = SubmissionState.SUBMITTING

        try:
            outcome = self.client.submit(self.record)
        except Exception:
            self.state = SubmissionState.FAILED
            raise

        with self._lock:
            self.outcome = outcome
            if isinstance(outcome, ValidationFailed):
                self.state = SubmissionState.UNSUBMITTED
            elif isinstance(outcome, Submitted):
                self.state = SubmissionState.SUBMITTED
            else:
                self.state = SubmissionState.FAILED

        logger.debug(f"Registration submission state: {self.state.value}")
        return outcome

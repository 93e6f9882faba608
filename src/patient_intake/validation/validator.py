"""Validation for patient registration records.

Completeness is the only gate on submission: ``validate_patient_record`` returns
the dotted paths of every blank field. Format checks collect advisory warnings
with actionable suggestions so the dialogue layer can double-check values with
the patient, but they never block a submission.
"""

import re
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Optional

from patient_intake.logging_audit import get_logger
from patient_intake.models.patient import PatientRecord


logger = get_logger(__name__)


class IssueSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """Individual validation issue with context and suggested fix.

    Attributes:
        field_path: Dotted wire path of the field (e.g. PatientInformation.SSN)
        severity: ERROR or WARNING level
        message: Description of what's wrong
        suggestion: Actionable guidance on how to fix the issue
    """

    field_path: str
    severity: IssueSeverity
    message: str
    suggestion: str


@dataclass
class ValidationReport:
    """Completeness and format validation results for one record.

    Attributes:
        missing_fields: Dotted paths of blank fields, in declaration order
        warnings: Advisory format issues
    """

    missing_fields: list[str] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Check if the record may be submitted."""
        return not self.missing_fields

    @property
    def has_warnings(self) -> bool:
        """Check if any warning-level issues exist."""
        return len(self.warnings) > 0

    def format_report(self) -> str:
        """Format validation results as human-readable report.

        Returns:
            Multi-line string with missing fields and format warnings
        """
        lines = []
        lines.append("=" * 60)
        lines.append("PATIENT RECORD VALIDATION REPORT")
        lines.append("=" * 60)
        lines.append("")

        if self.missing_fields:
            lines.append(f"MISSING FIELDS ({len(self.missing_fields)}):")
            for path in self.missing_fields:
                lines.append(f"  {path}")
            lines.append("")

        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for warning in self.warnings:
                lines.append(f"  [{warning.field_path}]: {warning.message}")
                lines.append(f"    → {warning.suggestion}")
            lines.append("")

        lines.append("=" * 60)
        if self.is_complete and not self.has_warnings:
            lines.append("RESULT: ✓ All validations passed")
        elif self.is_complete:
            lines.append("RESULT: ✓ Record complete, review warnings above")
        else:
            lines.append("RESULT: ✗ Record incomplete - supply missing fields above")
        lines.append("=" * 60)

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Export validation results as structured dictionary for JSON serialization."""
        return {
            "is_complete": self.is_complete,
            "missing_fields": list(self.missing_fields),
            "warnings": [
                {
                    "field_path": w.field_path,
                    "severity": w.severity.value,
                    "message": w.message,
                    "suggestion": w.suggestion,
                }
                for w in self.warnings
            ],
        }


def validate_patient_record(record: PatientRecord) -> list[str]:
    """Return the dotted paths of every blank field in the record.

    A field is missing when it is empty after trimming whitespace. Paths are
    ordered PatientInformation fields first, then Address fields, each in
    declaration order.

    Args:
        record: Candidate patient record

    Returns:
        List of missing field paths; empty when the record is complete

    Example:
        >>> validate_patient_record(record_with_blank_zip)
        ['Address.ZipCode']
    """
    missing: list[str] = []
    for section in record.sections:
        for f in fields(section):
            value = getattr(section, f.name)
            if value is None or value.strip() == "":
                missing.append(f"{section.SECTION}.{f.metadata['wire_name']}")
    return missing


# Validation regex patterns
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
SSN_PATTERN = re.compile(r"^\d{3}-\d{2}-\d{4}$")
US_ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

# Digit counts from a national number up to a full E.164 number
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15

# Age validation thresholds
MIN_REASONABLE_AGE = 0
MAX_REASONABLE_AGE = 120

DOB_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%m-%d-%Y", "%m/%d/%Y", "%Y-%m-%d")

US_COUNTRY_NAMES = {"us", "usa", "united states", "united states of america"}


def parse_date_of_birth(value: str) -> Optional[date]:
    """Parse a date of birth in any of the accepted spoken/typed formats.

    Args:
        value: Date string such as "September 7, 1996" or "09-07-1996"

    Returns:
        Parsed date, or None if no format matches
    """
    text = value.strip()
    for fmt in DOB_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def check_record_formats(
    record: PatientRecord, today: Optional[date] = None
) -> list[ValidationIssue]:
    """Collect advisory format warnings for non-blank fields.

    Blank fields are skipped; completeness is reported by
    validate_patient_record.

    Args:
        record: Patient record to check
        today: Reference date for age checks (defaults to today)

    Returns:
        List of WARNING-level issues
    """
    info = record.patient_information
    address = record.address
    today = today or date.today()
    warnings: list[ValidationIssue] = []

    def warn(path: str, message: str, suggestion: str) -> None:
        warnings.append(
            ValidationIssue(
                field_path=path,
                severity=IssueSeverity.WARNING,
                message=message,
                suggestion=suggestion,
            )
        )

    if info.date_of_birth.strip():
        dob = parse_date_of_birth(info.date_of_birth)
        if dob is None:
            warn(
                "PatientInformation.DateOfBirth",
                f"Date of birth could not be parsed: {info.date_of_birth}",
                'Use month-day-year, e.g. "September 7, 1996"',
            )
        elif dob > today:
            warn(
                "PatientInformation.DateOfBirth",
                f"Future date of birth: {info.date_of_birth}",
                "Verify the date with the patient",
            )
        else:
            age = (today - dob).days // 365
            if age > MAX_REASONABLE_AGE:
                warn(
                    "PatientInformation.DateOfBirth",
                    f"Age appears unreasonable ({age} years old)",
                    "Verify the date with the patient",
                )

    if info.ssn.strip() and not SSN_PATTERN.match(info.ssn.strip()):
        warn(
            "PatientInformation.SSN",
            "SSN format invalid",
            "SSN must be nine digits in the format XXX-XX-XXXX",
        )

    if info.email.strip() and not EMAIL_PATTERN.match(info.email.strip()):
        warn(
            "PatientInformation.EmailID",
            f"Email format appears invalid: {info.email.strip()}",
            "Ensure email has format: name@domain.com",
        )

    if info.phone_number.strip():
        digits = re.sub(r"\D", "", info.phone_number)
        if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
            warn(
                "PatientInformation.PhoneNumber",
                f"Phone number has {len(digits)} digits",
                "Confirm the number and include the country code if needed",
            )

    zip_code = address.zip_code.strip()
    if zip_code and address.country.strip().lower() in US_COUNTRY_NAMES:
        if not US_ZIP_PATTERN.match(zip_code):
            warn(
                "Address.ZipCode",
                f"ZIP code format invalid: {zip_code}",
                "Use format: 12345 or 12345-6789",
            )

    return warnings


def build_validation_report(
    record: PatientRecord, today: Optional[date] = None
) -> ValidationReport:
    """Run completeness and format checks and bundle the results.

    Args:
        record: Patient record to validate
        today: Reference date for age checks (defaults to today)

    Returns:
        ValidationReport with missing fields and warnings
    """
    report = ValidationReport(
        missing_fields=validate_patient_record(record),
        warnings=check_record_formats(record, today=today),
    )
    logger.info(
        f"Validation complete: missing={len(report.missing_fields)}, "
        f"warnings={len(report.warnings)}"
    )
    return report

"""Patient record CLI commands for Patient Intake.

This module provides CLI commands to validate a registration record file and
to submit it to the records API.
"""

import json as json_lib
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from patient_intake.models.outcomes import SubmissionFailed, ValidationFailed
from patient_intake.models.patient import PatientRecord
from patient_intake.records.client import PatientRecordClient
from patient_intake.utils.exceptions import ValidationError, remediation_hint
from patient_intake.validation.validator import build_validation_report

logger = logging.getLogger(__name__)


def load_record_file(file: Path) -> PatientRecord:
    """Load a patient record from a JSON file.

    Args:
        file: Path to a JSON file in the {PatientInformation, Address} shape

    Returns:
        PatientRecord instance

    Raises:
        ValidationError: If the file cannot be read as UTF-8, is not valid JSON
            or is not a record object
    """
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(
            f"Could not read record file: {file}\n"
            f"Error: {e}\n"
            f"Fix: Save the record as UTF-8 JSON and check file permissions"
        ) from e

    try:
        data = json_lib.loads(text)
    except json_lib.JSONDecodeError as e:
        raise ValidationError(
            f"Invalid JSON in record file: {file}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e

    try:
        return PatientRecord.from_dict(data)
    except TypeError as e:
        raise ValidationError(f"Invalid patient record in {file}: {e}") from e


@click.group()
def record() -> None:
    """Patient record validation and submission commands."""
    pass


@record.command("validate")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
def validate_record_command(file: Path, json_output: bool) -> None:
    """Validate a patient record JSON file.

    Reports every blank required field plus advisory format warnings
    (SSN, email, phone, date of birth, ZIP code).

    Exits with code 0 when the record is complete (warnings are OK), code 1
    when required fields are missing.

    Examples:

        patient-intake record validate patient.json

        patient-intake record validate patient.json --json
    """
    try:
        patient_record = load_record_file(file)
    except ValidationError as e:
        click.secho(f"Validation Error: {e}", fg="red", err=True)
        sys.exit(1)

    report = build_validation_report(patient_record)

    if json_output:
        click.echo(json_lib.dumps(report.to_dict(), indent=2))
    elif not report.is_complete:
        click.secho(report.format_report(), fg="red", err=True)
    elif report.has_warnings:
        click.secho(report.format_report(), fg="yellow")
    else:
        click.secho(report.format_report(), fg="green")

    sys.exit(0 if report.is_complete else 1)


@record.command("submit")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--endpoint",
    type=str,
    default=None,
    help="CreatePatient endpoint URL (overrides config)",
)
@click.pass_context
def submit_record_command(
    ctx: click.Context, file: Path, endpoint: Optional[str]
) -> None:
    """Submit a patient record JSON file to the records API.

    Prints the outcome as JSON ({success, error?, isNetworkError?, response?}).
    Exits with code 0 on success, code 1 otherwise.

    Examples:

        patient-intake record submit patient.json

        patient-intake record submit patient.json --endpoint http://localhost:8080/api/Users/v1/CreatePatient
    """
    config = ctx.obj["config"]

    try:
        patient_record = load_record_file(file)
        client = PatientRecordClient(config, endpoint_url=endpoint)
    except ValidationError as e:
        click.secho(f"Validation Error: {e}", fg="red", err=True)
        sys.exit(1)

    with client:
        outcome = client.submit(patient_record)

    click.echo(json_lib.dumps(outcome.to_dict(), indent=2))

    if outcome.success:
        click.secho("✓ Patient record submitted", fg="green", err=True)
        sys.exit(0)

    hint = remediation_hint(
        is_network_error=isinstance(outcome, SubmissionFailed) and outcome.is_network_error,
        missing_fields=isinstance(outcome, ValidationFailed),
    )
    click.secho(f"✗ Submission failed. {hint}", fg="red", err=True)
    sys.exit(1)

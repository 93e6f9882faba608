"""Function-tool handler for saving collected patient details.

The dialogue layer exposes ``save_patient_details`` to the conversational
model once every field has been collected and confirmed. The handler turns the
tool-call arguments into a PatientRecord, submits it, and returns the outcome
as a JSON string for the model to relay to the patient.
"""

import json
import logging
from dataclasses import fields
from typing import Any, Mapping

from patient_intake.models.patient import Address, PatientInformation, PatientRecord
from patient_intake.records.client import PatientRecordClient

logger = logging.getLogger(__name__)

SAVE_PATIENT_DETAILS = "save_patient_details"
GET_PATIENT_BASIC_INFORMATION = "get_patient_basic_information"


def _section_schema(section: type) -> dict[str, Any]:
    wire_names = [f.metadata["wire_name"] for f in fields(section)]
    return {
        "type": "object",
        "properties": {name: {"type": "string"} for name in wire_names},
        "required": wire_names,
    }


SAVE_PATIENT_DETAILS_SCHEMA: dict[str, Any] = {
    "name": SAVE_PATIENT_DETAILS,
    "type": "function",
    "description": (
        "Save the collected patient details to the medical records system. "
        "Only call this once ALL fields are collected and confirmed."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            PatientInformation.SECTION: _section_schema(PatientInformation),
            Address.SECTION: _section_schema(Address),
        },
        "required": [PatientInformation.SECTION, Address.SECTION],
    },
}

GET_PATIENT_BASIC_INFORMATION_SCHEMA: dict[str, Any] = {
    "name": GET_PATIENT_BASIC_INFORMATION,
    "type": "function",
    "description": "Collect basic patient information",
    "parameters": _section_schema(PatientInformation),
}

TOOL_SCHEMAS = [SAVE_PATIENT_DETAILS_SCHEMA]
TOOL_TEMPLATES = [GET_PATIENT_BASIC_INFORMATION_SCHEMA]


def handle_save_patient_details(
    args: Mapping[str, Any], client: PatientRecordClient
) -> str:
    """Handle a save_patient_details tool call.

    Args:
        args: Tool-call arguments in the {PatientInformation, Address} shape
        client: Records API client

    Returns:
        JSON string {success, error?, isNetworkError?, response?}
    """
    try:
        record = PatientRecord.from_dict(args)
    except TypeError as e:
        logger.error(f"Malformed {SAVE_PATIENT_DETAILS} arguments: {e}")
        return json.dumps({"success": False, "error": str(e)})

    outcome = client.submit(record)
    return json.dumps(outcome.to_dict())

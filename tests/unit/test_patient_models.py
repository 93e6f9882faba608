"""Unit tests for patient record and submission outcome models."""

import dataclasses
import json

import pytest

from patient_intake.models.outcomes import (
    OutcomeKind,
    SubmissionFailed,
    Submitted,
    ValidationFailed,
)
from patient_intake.models.patient import Address, PatientInformation, PatientRecord


class TestPatientRecordSerialization:
    """Test wire-shape mapping of PatientRecord."""

    def test_to_dict_uses_wire_names_and_nesting(self, complete_record, complete_record_dict):
        """Test serialization matches the records-API field names and casing."""
        assert complete_record.to_dict() == complete_record_dict

    def test_to_dict_preserves_declaration_order(self, complete_record):
        """Test keys are emitted in declaration order."""
        data = complete_record.to_dict()

        assert list(data) == ["PatientInformation", "Address"]
        assert list(data["PatientInformation"]) == [
            "FirstName", "LastName", "DateOfBirth", "SSN",
            "EmailID", "MaritalStatus", "PhoneNumber",
        ]
        assert list(data["Address"]) == [
            "Type", "AddressLine1", "City", "State", "Country", "ZipCode",
        ]

    def test_json_round_trip_is_field_for_field_equal(self, complete_record):
        """Test serialize -> JSON -> parse yields an equal record."""
        wire = json.dumps(complete_record.to_dict())

        restored = PatientRecord.from_dict(json.loads(wire))

        assert restored == complete_record

    def test_from_dict_maps_attributes(self, complete_record):
        """Test wire names land on snake_case attributes."""
        assert complete_record.patient_information.first_name == "Jane"
        assert complete_record.patient_information.email == "jane.doe@example.com"
        assert complete_record.address.address_line1 == "742 Evergreen Terrace"
        assert complete_record.address.zip_code == "78701"

    def test_from_dict_absent_and_none_become_empty(self):
        """Test missing keys and None values become empty strings."""
        record = PatientRecord.from_dict({
            "PatientInformation": {"FirstName": "Jane", "LastName": None},
        })

        assert record.patient_information.first_name == "Jane"
        assert record.patient_information.last_name == ""
        assert record.address == Address.from_dict({})

    def test_from_dict_converts_non_string_scalars(self):
        """Test numeric values are converted with str()."""
        record = PatientRecord.from_dict({"Address": {"ZipCode": 78701}})

        assert record.address.zip_code == "78701"

    def test_from_dict_rejects_non_mapping_section(self):
        """Test a section that is not an object raises TypeError."""
        with pytest.raises(TypeError, match="Address must be an object"):
            PatientRecord.from_dict({"PatientInformation": {}, "Address": "Austin"})

    def test_from_dict_rejects_non_mapping_record(self):
        """Test a record that is not an object raises TypeError."""
        with pytest.raises(TypeError, match="Patient record must be an object"):
            PatientRecord.from_dict(["Jane", "Doe"])

    def test_record_is_immutable(self, complete_record):
        """Test records cannot be modified after construction."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            complete_record.patient_information.first_name = "John"


class TestSubmissionOutcomes:
    """Test caller-facing outcome serialization."""

    def test_validation_failed_to_dict(self):
        """Test ValidationFailed lists missing fields in the error text."""
        outcome = ValidationFailed(
            missing_fields=("PatientInformation.SSN", "Address.ZipCode")
        )

        assert outcome.kind == OutcomeKind.VALIDATION_FAILED
        assert outcome.success is False
        assert outcome.to_dict() == {
            "success": False,
            "error": "Missing required fields: PatientInformation.SSN, Address.ZipCode",
        }

    def test_submitted_to_dict(self):
        """Test Submitted carries the remote response body."""
        outcome = Submitted(response_body={"patientId": "P-1"})

        assert outcome.success is True
        assert outcome.to_dict() == {"success": True, "response": {"patientId": "P-1"}}

    def test_submission_failed_to_dict(self):
        """Test SubmissionFailed exposes the network flag."""
        outcome = SubmissionFailed(message="Connection refused", is_network_error=True, attempts=3)

        assert outcome.success is False
        assert outcome.to_dict() == {
            "success": False,
            "error": "Connection refused",
            "isNetworkError": True,
        }

    def test_outcomes_are_json_serializable(self):
        """Test every outcome serializes with json.dumps."""
        outcomes = [
            ValidationFailed(missing_fields=("Address.City",)),
            Submitted(response_body={"success": True}),
            SubmissionFailed(message="API responded with 500: Internal error", is_network_error=False),
        ]

        for outcome in outcomes:
            assert json.loads(json.dumps(outcome.to_dict())) == outcome.to_dict()

    def test_section_names(self):
        """Test section constants match the wire object names."""
        assert PatientInformation.SECTION == "PatientInformation"
        assert Address.SECTION == "Address"

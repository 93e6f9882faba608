"""Unit tests for the mock records API."""

import json

import pytest

from patient_intake.mock_server.app import CREATE_PATIENT_PATH, app, initialize_app
from patient_intake.mock_server.config import (
    CreatePatientBehavior,
    MockServerConfig,
    ResponseMode,
)


@pytest.fixture
def make_client(tmp_path):
    """Return a factory building a Flask test client for a given behavior."""

    def _make(**behavior):
        config = MockServerConfig(
            log_path=str(tmp_path / "mock-server.log"),
            create_patient=CreatePatientBehavior(**behavior),
        )
        initialize_app(config)
        app.config["TESTING"] = True
        return app.test_client()

    return _make


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, make_client):
        client = make_client()

        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert CREATE_PATIENT_PATH in data["endpoints"]


class TestCreatePatient:
    """Tests for the CreatePatient endpoint."""

    def test_accepts_complete_record(self, make_client, complete_record_dict):
        """Test a complete record is created with a patient ID."""
        # Arrange
        client = make_client()

        # Act
        response = client.post(CREATE_PATIENT_PATH, json=complete_record_dict)

        # Assert
        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["patientId"].startswith("PAT-")

    def test_rejects_incomplete_record(self, make_client, complete_record_dict):
        """Test incomplete records get 422 with the missing paths."""
        client = make_client()
        complete_record_dict["Address"]["City"] = ""

        response = client.post(CREATE_PATIENT_PATH, json=complete_record_dict)

        assert response.status_code == 422
        assert response.get_json()["missingFields"] == ["Address.City"]

    def test_validation_can_be_disabled(self, make_client):
        client = make_client(validate_payload=False)

        response = client.post(CREATE_PATIENT_PATH, json={})

        assert response.status_code == 200

    def test_rejects_non_json(self, make_client):
        client = make_client()

        response = client.post(CREATE_PATIENT_PATH, data="plain", content_type="text/plain")

        assert response.status_code == 400

    def test_rejects_malformed_section(self, make_client):
        client = make_client()

        response = client.post(CREATE_PATIENT_PATH, json={"Address": "Austin"})

        assert response.status_code == 400
        assert b"Address must be an object" in response.data

    def test_forced_failure_status(self, make_client, complete_record_dict):
        """Test a configured error status returns the failure body."""
        client = make_client(status_code=500, failure_body="Internal error")

        response = client.post(CREATE_PATIENT_PATH, json=complete_record_dict)

        assert response.status_code == 500
        assert response.data == b"Internal error"
        assert response.mimetype == "text/plain"

    def test_empty_response_mode(self, make_client, complete_record_dict):
        client = make_client(response_mode=ResponseMode.EMPTY)

        response = client.post(CREATE_PATIENT_PATH, json=complete_record_dict)

        assert response.status_code == 200
        assert response.data == b""
        assert response.mimetype == "application/json"

    def test_text_response_mode(self, make_client, complete_record_dict):
        client = make_client(response_mode=ResponseMode.TEXT, status_code=201)

        response = client.post(CREATE_PATIENT_PATH, json=complete_record_dict)

        assert response.status_code == 201
        assert response.mimetype == "text/plain"
        assert response.data.startswith(b"Created PAT-")

    def test_response_delay(self, make_client, complete_record_dict, mocker):
        """Test the configured delay is applied before responding."""
        sleep = mocker.patch("patient_intake.mock_server.app.time.sleep")
        client = make_client(response_delay_ms=250)

        client.post(CREATE_PATIENT_PATH, json=complete_record_dict)

        sleep.assert_called_once_with(0.25)

    def test_requests_logged(self, make_client, complete_record_dict, tmp_path):
        client = make_client()

        client.post(CREATE_PATIENT_PATH, data=json.dumps(complete_record_dict),
                    content_type="application/json")

        log_text = (tmp_path / "mock-server.log").read_text()
        assert f"POST {CREATE_PATIENT_PATH}" in log_text

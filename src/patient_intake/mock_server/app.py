"""Flask application mocking the remote records API."""

import logging
import time
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, Response, jsonify, request

from patient_intake.models.patient import PatientRecord
from patient_intake.validation.validator import validate_patient_record

from .config import MockServerConfig, ResponseMode, load_config

CREATE_PATIENT_PATH = "/api/Users/v1/CreatePatient"

# Server state tracking
_server_start_time: datetime | None = None
_request_count: int = 0
_config: MockServerConfig = MockServerConfig()

app = Flask(__name__)

logger = logging.getLogger("patient_intake.mock_server")


def setup_logging(config: MockServerConfig) -> logging.Logger:
    """Configure logging for mock server with rotation.

    Args:
        config: Mock server configuration

    Returns:
        Configured logger instance
    """
    logger.setLevel(config.log_level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path = Path(config.log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


@app.before_request
def log_request():
    """Log all incoming requests."""
    global _request_count
    _request_count += 1

    logger.info(
        f"Request #{_request_count}: {request.method} {request.path} "
        f"(Content-Length: {request.content_length or 0})"
    )


@app.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    uptime_seconds = 0
    if _server_start_time:
        uptime_seconds = int(
            (datetime.now(timezone.utc) - _server_start_time).total_seconds()
        )

    return jsonify({
        "status": "healthy",
        "port": _config.http_port,
        "endpoints": ["/health", CREATE_PATIENT_PATH],
        "uptime_seconds": uptime_seconds,
        "request_count": _request_count,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), 200


@app.route(CREATE_PATIENT_PATH, methods=["POST"])
def create_patient():
    """Mock CreatePatient endpoint.

    Honors the configured delay, forced status and success body shape. With
    validate_payload enabled, incomplete records are rejected with 422.
    """
    behavior = _config.create_patient

    if behavior.response_delay_ms:
        time.sleep(behavior.response_delay_ms / 1000)

    if behavior.status_code >= 300:
        logger.warning(f"Forced failure: HTTP {behavior.status_code}")
        return Response(
            behavior.failure_body,
            status=behavior.status_code,
            mimetype="text/plain",
        )

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return Response(
            "Request body must be a JSON object",
            status=400,
            mimetype="text/plain",
        )

    if behavior.validate_payload:
        try:
            record = PatientRecord.from_dict(payload)
        except TypeError as e:
            return Response(str(e), status=400, mimetype="text/plain")

        missing = validate_patient_record(record)
        if missing:
            logger.warning(f"Rejected incomplete record: {', '.join(missing)}")
            return jsonify({
                "success": False,
                "error": "Missing required fields",
                "missingFields": missing,
            }), 422

    patient_id = f"PAT-{uuid.uuid4().hex[:12].upper()}"
    logger.info(f"Created patient {patient_id}")

    if behavior.response_mode == ResponseMode.EMPTY:
        return Response("", status=behavior.status_code, mimetype="application/json")
    if behavior.response_mode == ResponseMode.TEXT:
        return Response(
            f"Created {patient_id}", status=behavior.status_code, mimetype="text/plain"
        )
    return jsonify({"success": True, "patientId": patient_id}), behavior.status_code


def initialize_app(config: MockServerConfig) -> None:
    """Initialize Flask app with configuration.

    Args:
        config: Mock server configuration
    """
    global _config, _server_start_time, _request_count
    _config = config
    _server_start_time = datetime.now(timezone.utc)
    _request_count = 0

    setup_logging(config)
    logger.info("Mock server application initialized")


def run_server(
    host: str | None = None,
    port: int | None = None,
    config: MockServerConfig | None = None,
    debug: bool = False,
) -> None:
    """Run the Flask mock server.

    Args:
        host: Host address (overrides config)
        port: Port number (overrides config)
        config: Mock server configuration (loads from file if not provided)
        debug: Enable debug mode (default: False)
    """
    if config is None:
        config = load_config()
    if port is not None:
        config = config.model_copy(update={"http_port": port})
    host = host or config.host

    initialize_app(config)

    logger.info(f"Starting mock records API on http://{host}:{config.http_port}")
    logger.info(f"CreatePatient endpoint: http://{host}:{config.http_port}{CREATE_PATIENT_PATH}")

    app.run(
        host=host,
        port=config.http_port,
        debug=debug,
        use_reloader=False,
    )


if __name__ == "__main__":
    run_server()

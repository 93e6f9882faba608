"""Integration test fixtures and configuration.

This module provides a live mock records API for integration tests. The Flask
app is served by a werkzeug server on a free local port in a background
thread, so the records client talks to it over real HTTP.
"""

import logging
import socket
import threading
import time
from typing import Callable, Iterator

import pytest
import requests
from werkzeug.serving import make_server

from patient_intake.config.schema import Config, EndpointsConfig, TransportConfig
from patient_intake.mock_server.app import CREATE_PATIENT_PATH, app, initialize_app
from patient_intake.mock_server.config import CreatePatientBehavior, MockServerConfig

logger = logging.getLogger(__name__)


def find_free_port() -> int:
    """Find an available port on localhost.

    Returns:
        int: An available port number.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        port = s.getsockname()[1]
    return port


def wait_for_server(url: str, timeout: float = 10.0, interval: float = 0.1) -> bool:
    """Wait for server to become available.

    Args:
        url: URL to check (e.g., health endpoint).
        timeout: Maximum time to wait in seconds.
        interval: Time between checks in seconds.

    Returns:
        bool: True if server responded, False on timeout.
    """
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            if requests.get(url, timeout=1).status_code == 200:
                return True
        except requests.RequestException:
            pass
        time.sleep(interval)
    return False


@pytest.fixture
def mock_records_api(tmp_path) -> Iterator[Callable[..., str]]:
    """Start the mock records API with a given CreatePatient behavior.

    Yields:
        Factory taking CreatePatientBehavior fields and returning the
        CreatePatient URL of the running server.
    """
    servers = []

    def _start(**behavior) -> str:
        port = find_free_port()
        config = MockServerConfig(
            host="127.0.0.1",
            http_port=port,
            log_path=str(tmp_path / "mock-server.log"),
            create_patient=CreatePatientBehavior(**behavior),
        )
        initialize_app(config)

        server = make_server("127.0.0.1", port, app, threaded=True)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append((server, thread))

        base_url = f"http://127.0.0.1:{port}"
        if not wait_for_server(f"{base_url}/health"):
            pytest.fail(f"Mock records API did not start on port {port}")
        logger.info(f"Mock records API running at {base_url}")
        return f"{base_url}{CREATE_PATIENT_PATH}"

    yield _start

    for server, thread in servers:
        server.shutdown()
        thread.join(timeout=5)


@pytest.fixture
def fast_retry_config() -> Callable[[str], Config]:
    """Return a factory for client config with zero backoff."""

    def _config(url: str, timeout: float = 5.0) -> Config:
        return Config(
            endpoints=EndpointsConfig(create_patient_url=url),
            transport=TransportConfig(timeout=timeout, max_attempts=3, backoff_base=0.0),
        )

    return _config


@pytest.fixture
def free_port() -> int:
    """Return a local port with nothing listening on it."""
    return find_free_port()


@pytest.fixture
def trickling_records_api() -> Iterator[Callable[..., str]]:
    """Start a raw socket server that sends a 200 body one byte at a time.

    Yields:
        Factory taking the body and per-byte interval and returning the
        CreatePatient URL of the running server.
    """
    stop = threading.Event()
    threads = []

    def _serve_connection(conn: socket.socket, body: bytes, interval: float) -> None:
        with conn:
            conn.settimeout(5)
            request = b""
            while b"\r\n\r\n" not in request:
                data = conn.recv(4096)
                if not data:
                    return
                request += data
            try:
                conn.sendall(
                    b"HTTP/1.1 200 OK\r\n"
                    b"Content-Type: application/json\r\n"
                    + f"Content-Length: {len(body)}\r\n".encode("ascii")
                    + b"Connection: close\r\n\r\n"
                )
                for byte in body:
                    if stop.is_set():
                        return
                    conn.sendall(bytes([byte]))
                    time.sleep(interval)
            except OSError:
                # Client gave up and closed the connection
                return

    def _start(body: bytes = b'{"success": true}', interval: float = 0.25) -> str:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(5)
        listener.settimeout(0.1)
        port = listener.getsockname()[1]

        def _accept_loop() -> None:
            with listener:
                while not stop.is_set():
                    try:
                        conn, _ = listener.accept()
                    except socket.timeout:
                        continue
                    worker = threading.Thread(
                        target=_serve_connection, args=(conn, body, interval), daemon=True
                    )
                    worker.start()
                    threads.append(worker)

        acceptor = threading.Thread(target=_accept_loop, daemon=True)
        acceptor.start()
        threads.append(acceptor)
        return f"http://127.0.0.1:{port}{CREATE_PATIENT_PATH}"

    yield _start

    stop.set()
    for thread in threads:
        thread.join(timeout=5)

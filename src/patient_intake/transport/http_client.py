"""HTTP session factory for the records API.

Sessions enforce TLS 1.2+ on HTTPS and honor the configured certificate
verification. Retries are owned by the submission client, so no urllib3
Retry is mounted here.
"""

import logging
import ssl

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.ssl_ import create_urllib3_context

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class TLS12Adapter(HTTPAdapter):
    """Force TLS 1.2+ for HTTPS connections.

    Example:
        >>> session = requests.Session()
        >>> session.mount('https://', TLS12Adapter())
    """

    def init_poolmanager(self, *args, **kwargs):
        """Initialize connection pool with TLS 1.2+ enforcement."""
        context = create_urllib3_context()
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        kwargs['ssl_context'] = context
        return super().init_poolmanager(*args, **kwargs)


def create_session(verify_tls: bool = True) -> requests.Session:
    """Create a session for JSON requests to the records API.

    Args:
        verify_tls: Whether to verify server TLS certificates

    Returns:
        Configured requests.Session. Caller is responsible for closing.

    Example:
        >>> session = create_session()
        >>> try:
        ...     response = session.post(url, data=body, timeout=30)
        ... finally:
        ...     session.close()
    """
    session = requests.Session()
    session.mount("https://", TLS12Adapter())
    session.headers.update(DEFAULT_HEADERS)
    session.verify = verify_tls

    if not verify_tls:
        logger.warning(
            "TLS certificate verification is DISABLED. "
            "This should only be used for development with self-signed certificates."
        )

    logger.debug(f"Created HTTP session (verify_tls={verify_tls})")
    return session

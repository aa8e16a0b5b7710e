"""HTTP download of forest snapshots.

Snapshots exported by a devtools bridge are often served from an internal
host behind corporate SSL inspection (e.g., Netskope). The session built
here trusts the corporate CA bundle when one is configured or found.

Environment:
    INJTRACE_CA_BUNDLE: explicit CA bundle path
    INJTRACE_HTTP_TIMEOUT: request timeout in seconds (default 30)
"""

import logging
import os
import ssl
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.ssl_ import create_urllib3_context

from . import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# Known corporate SSL inspection cert bundle locations
CORPORATE_CERT_PATHS = [
    "/Library/Application Support/Netskope/STAgent/data/netskope-cert-bundle.pem",  # Netskope macOS
    "/etc/netskope/cert-bundle.pem",  # Netskope Linux
]


def get_ca_bundle_path() -> Optional[str]:
    """Return the configured CA bundle, or a detected corporate one."""
    configured = os.environ.get("INJTRACE_CA_BUNDLE")
    if configured:
        if os.path.exists(configured):
            return configured
        logger.warning(f"INJTRACE_CA_BUNDLE points to a missing file: {configured}")
    for path in CORPORATE_CERT_PATHS:
        if os.path.exists(path):
            return path
    return None


def get_timeout() -> float:
    """Request timeout from INJTRACE_HTTP_TIMEOUT, falling back to the default."""
    raw = os.environ.get("INJTRACE_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid INJTRACE_HTTP_TIMEOUT: {raw!r}")
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


class CABundleAdapter(HTTPAdapter):
    """HTTPS adapter that loads an extra CA bundle into its SSL context."""

    def __init__(self, cert_path: str, **kwargs):
        self.cert_path = cert_path
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        ctx = create_urllib3_context()
        if os.path.exists(self.cert_path):
            ctx.load_verify_locations(self.cert_path)
        # OpenSSL 3.x rejects inspection certs lacking key usage extensions
        ctx.verify_flags = ssl.VERIFY_DEFAULT
        kwargs['ssl_context'] = ctx
        logger.debug(f"Loaded CA bundle from {self.cert_path}")
        return super().init_poolmanager(*args, **kwargs)


def create_session() -> requests.Session:
    """Create a requests session for fetching snapshots."""
    session = requests.Session()
    session.headers.update({
        "Accept": "application/json",
        "User-Agent": f"injtrace/{__version__}"
    })

    cert_path = get_ca_bundle_path()
    if cert_path:
        logger.info(f"Using CA bundle {cert_path}")
        session.mount('https://', CABundleAdapter(cert_path=cert_path))

    return session


def fetch_snapshot(url: str) -> str:
    """
    Download a snapshot document.

    Args:
        url: http(s) URL of the snapshot

    Returns:
        Response body as text

    Raises:
        requests.RequestException: On connection errors or non-2xx status
    """
    logger.info(f"Fetching snapshot from URL: {url}")
    with create_session() as session:
        response = session.get(url, timeout=get_timeout())
        response.raise_for_status()
        return response.text

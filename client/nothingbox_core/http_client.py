"""
HTTP session with connection pooling and an explicit CA bundle.

Every call is a single round trip: the adapter's Retry is set to zero so a
failure surfaces to the caller immediately instead of being replayed here.
"""

import os

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_retry_strategy = Retry(
    total=0,
    connect=0,
    read=0,
    redirect=3,
    raise_on_status=False,
)


def _get_ca_bundle():
    """Get the CA bundle path. Priority: env var → certifi."""
    env_ca = os.environ.get("REQUESTS_CA_BUNDLE") or os.environ.get("SSL_CERT_FILE")
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    return certifi.where()


def create_session():
    """Create a new requests.Session with connection pooling and SSL."""
    session = requests.Session()
    # Two leaderboard fetches plus a time push may be in flight together.
    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=4,
        max_retries=_retry_strategy,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = _get_ca_bundle()
    session.headers.update({"Accept": "application/json"})
    return session


import logging

import requests

from ..errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "buenos-dias-scraper/1.0 (+https://buenosdias.cl)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}
DEFAULT_TIMEOUT = 15


def build_session():
    """Create a requests session carrying the scraper's default headers."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    return session


def fetch_text(url, session=None, timeout=DEFAULT_TIMEOUT):
    """Fetch a URL and return its body as text.

    Raises FetchError on network failures and non-success status codes.
    """
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=timeout, headers=None if session is not None else DEFAULT_HEADERS)
    except requests.RequestException as e:
        raise FetchError(url, message=f"Request failed for {url}: {e}") from e

    if not response.ok:
        raise FetchError(url, status=response.status_code)
    return response.text

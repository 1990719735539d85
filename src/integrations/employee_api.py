"""
Employee archive API client.

This module downloads the employee ZIP archive with a single HTTP GET.

Usage:
    from integrations import employee_api

    payload = employee_api.fetch_archive(employee_api.DEFAULT_ARCHIVE_URL)
    print(len(payload))  # Archive size in bytes
"""

import logging
from typing import Optional

import requests

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_URL = (
    "https://s3.eu-west-2.amazonaws.com/interview.thanskben.com/backend/employees_19-02-2024.zip"
)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class FetchError(Exception):
    """Raised when the archive cannot be downloaded (transport error or non-200 status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# Public API
# ============================================================================

def fetch_archive(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None
) -> bytes:
    """
    Download the employee archive.

    One request, no retries. Without a timeout the transport default applies.

    Args:
        url: Archive URL
        timeout: Optional request timeout in seconds
        session: Optional requests session (defaults to module-level requests.get)

    Returns:
        bytes: The full response body

    Raises:
        FetchError: On connection/transport failure or a non-200 response
    """
    logger.info(f"Fetching employee archive: {url}")
    getter = session.get if session is not None else requests.get

    try:
        response = getter(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"Error calling API: {e}") from e

    if response.status_code != 200:
        raise FetchError(
            f"Error calling API: {response.status_code} {response.reason}",
            status_code=response.status_code
        )

    payload = response.content
    logger.info(f"Fetched {len(payload):,} bytes from {url}")
    return payload

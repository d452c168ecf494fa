"""USGS API Client - Imperative Shell.

This module handles HTTP communication with the USGS Earthquake API.
All I/O is contained here; feed parsing is in the core module.
"""

import logging
from dataclasses import dataclass

import requests

from quakereport.core.config import USGS_REQUEST_URL


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


class FetchError(Exception):
    """The feed could not be fetched."""


class FetchTimeoutError(FetchError):
    """The request timed out."""


class FetchConnectionError(FetchError):
    """The host could not be reached (DNS, refused, unreachable)."""


class FetchStatusError(FetchError):
    """The service answered with a non-200 status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Unexpected HTTP status {status_code}")


@dataclass
class USGSQueryParams:
    """Parameters for USGS API query.

    Values are passed through as given; the service validates them.

    Attributes:
        min_magnitude: Minimum magnitude to fetch
        order_by: Sort order ("time", "magnitude", ...)
        limit: Maximum number of results
        format: Response format
    """
    min_magnitude: str = "6"
    order_by: str = "magnitude"
    limit: int = 10
    format: str = "geojson"


def build_request_url(
    base_url: str,
    min_magnitude: str,
    order_by: str,
    limit: int,
    format: str = "geojson",
) -> str:
    """Build the USGS query URL.

    Parameters are appended in a fixed order (format, limit, minmag,
    orderby) so the same inputs always give the same URL.

    Args:
        base_url: USGS query endpoint
        min_magnitude: Minimum magnitude
        order_by: Sort order
        limit: Maximum number of results
        format: Response format

    Returns:
        Full request URL
    """
    params = [
        ("format", str(format)),
        ("limit", str(limit)),
        ("minmag", str(min_magnitude)),
        ("orderby", str(order_by)),
    ]
    request = requests.PreparedRequest()
    request.prepare_url(base_url, params)
    return request.url


class USGSClient:
    """Client for fetching earthquake feeds from the USGS API.

    This is part of the imperative shell - it handles HTTP I/O.
    Failures are raised as FetchError subclasses and never retried.
    """

    def __init__(
        self,
        base_url: str = USGS_REQUEST_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize USGS client.

        Args:
            base_url: USGS API base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self, url: str) -> bytes:
        """Fetch a URL and return the raw response body.

        This method performs HTTP I/O.

        Args:
            url: Full request URL

        Returns:
            Raw response body

        Raises:
            FetchTimeoutError: If the request timed out
            FetchConnectionError: If the host could not be reached
            FetchStatusError: If the response status is not 200
            FetchError: For any other request failure
        """
        logger.info("Fetching earthquakes from USGS: %s", url)

        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            logger.error("USGS request timed out")
            raise FetchTimeoutError("Request timed out") from e
        except requests.ConnectionError as e:
            logger.error("Could not connect to USGS: %s", str(e))
            raise FetchConnectionError(str(e)) from e
        except requests.RequestException as e:
            logger.error("USGS request failed: %s", str(e))
            raise FetchError(str(e)) from e

        if response.status_code != 200:
            logger.warning(
                "USGS returned non-200: %d",
                response.status_code,
            )
            raise FetchStatusError(response.status_code)

        logger.info("Fetched %d bytes from USGS", len(response.content))

        return response.content

    def fetch_feed(self, query: USGSQueryParams) -> bytes:
        """Build the request URL for a query and fetch it.

        Args:
            query: Query parameters

        Returns:
            Raw GeoJSON response body

        Raises:
            FetchError: If the URL is invalid or the request fails
        """
        try:
            url = build_request_url(
                self.base_url,
                min_magnitude=query.min_magnitude,
                order_by=query.order_by,
                limit=query.limit,
                format=query.format,
            )
        except requests.RequestException as e:
            logger.error("Invalid USGS base URL %s: %s", self.base_url, str(e))
            raise FetchError(str(e)) from e

        return self.fetch(url)

"""Outbound HTTP client for the upstream weather APIs."""

import logging
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when an upstream service cannot be reached."""


class UpstreamTimeout(UpstreamError):
    """Raised when an upstream request exceeds its timeout."""


class UpstreamUnavailable(UpstreamError):
    """Raised on connection and other transport failures."""


class UpstreamClient:
    """
    Thin GET wrapper around a shared httpx.AsyncClient.

    Only a 200 response counts as success. Redirects are not followed, so
    a 3xx is a failure like any other non-200 status. No retries.
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float):
        """
        Initialize upstream client.

        Args:
            http_client: Process-wide async HTTP client
            timeout: Per-request timeout in seconds
        """
        self.http_client = http_client
        self.timeout = timeout

    async def fetch(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None
    ) -> Optional[str]:
        """
        Issue a GET request and return the body of a 200 response.

        Args:
            url: Upstream endpoint
            params: Query parameters, URL-encoded by httpx

        Returns:
            Response text on HTTP 200, None on any other status

        Raises:
            UpstreamTimeout: If the request timed out
            UpstreamUnavailable: If the request failed at the transport level
        """
        try:
            response = await self.http_client.get(
                url,
                params=params,
                timeout=self.timeout,
                follow_redirects=False
            )
        except httpx.TimeoutException as e:
            logger.error(f"Upstream request timeout: {url} ({e!r})")
            raise UpstreamTimeout(f"Timed out calling {url}") from e
        except httpx.RequestError as e:
            logger.error(f"Upstream request error: {url} ({e!r})")
            raise UpstreamUnavailable(f"Could not reach {url}") from e

        if response.status_code != 200:
            logger.warning(
                f"Upstream returned HTTP {response.status_code}: {response.request.url}"
            )
            return None

        return response.text

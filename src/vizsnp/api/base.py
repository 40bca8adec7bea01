"""Shared async HTTP plumbing for the remote service clients.

Key Design:
- Async HTTP with connection pooling (httpx.AsyncClient)
- Retry with exponential backoff (tenacity), transport failures only;
  an error status is surfaced immediately and never retried
- Context manager for session cleanup
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from vizsnp.errors import RemoteError

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """Base class holding the HTTP session and the request helpers."""

    DEFAULT_TIMEOUT = 30.0
    SERVICE_NAME = "API"
    error_class: type[RemoteError] = RemoteError

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Service root URL
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts for transport failures
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying connection errors and timeouts.

        Raises:
            RemoteError: (client-specific subclass) if all attempts fail
        """
        client = self._get_client()
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=2, max=10),
                reraise=True,
            ):
                with attempt:
                    return await client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise self.error_class(f"{self.SERVICE_NAME} request to {url} failed: {e}")
        raise self.error_class(f"{self.SERVICE_NAME} request to {url} was not attempted")

    def _check_status(self, response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self.error_class(f"{self.SERVICE_NAME} HTTP error: {e}")

    def _json(self, response: httpx.Response) -> Any:
        """Check the status and decode the JSON body."""
        self._check_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise self.error_class(f"Invalid JSON from {self.SERVICE_NAME}: {e}")

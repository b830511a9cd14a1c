"""Base client for network requests."""

import logging
from time import sleep

import httpx

from issue_archiver.retry import RetryPolicy

from .exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (httpx.ConnectError, httpx.TimeoutException, RateLimitError)


class Client:
    """Base class for network clients.

    Provides a lazy-initialized httpx.Client with context manager support,
    configurable timeout, retries, and headers via dict config.

    Config keys:
        base_url: Base URL for relative paths (default: none)
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Attempts for transient failures (default: 3)
        retry_delay: Delay between attempts in seconds (default: 5)
        headers: Additional headers to include in requests
    """

    def __init__(self, config: dict | None = None, transport: httpx.BaseTransport | None = None):
        self._config = config or {}
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return str(self._config.get("base_url", ""))

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return int(self._config.get("retry_attempts", 3))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 5))

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._config.get("headers", {}))

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            delay=self.retry_delay,
            retry_on=TRANSIENT_ERRORS,
            sleeper=self._config.get("sleeper", sleep),
        )

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Map HTTP errors to exceptions.

        Raises:
            NotFoundError: For 404 responses
            RateLimitError: For 429 responses
            APIError: For other non-2xx responses
        """
        if response.is_success:
            return response

        status_code = response.status_code

        if status_code == 404:
            raise NotFoundError(f"Resource not found: {response.url}")
        elif status_code == 429:
            raise RateLimitError(f"Rate limit exceeded: {response.url}")
        else:
            raise APIError(
                f"API error {status_code}: {response.url}",
                status_code=status_code,
            )

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = self.client.request(method, url, **kwargs)
        return self._handle_response(response)

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make a request, retrying transient failures.

        Raises:
            ConnectionError: If all attempts fail due to network issues
            APIError: If the server returns a non-2xx response
        """
        try:
            return self.retry_policy.call(
                self._send, method, url, description=f"{method} {url}", **kwargs
            )
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            msg = f"Connection failed after {self.retry_attempts} attempts: {url}"
            raise ConnectionError(msg) from e

    def get(self, url: str, **kwargs) -> httpx.Response:
        """Convenience method for GET requests."""
        return self._request("GET", url, **kwargs)

"""Exceptions for HTTP page clients."""

from issue_archiver.exceptions import ArchiverError


class ClientError(ArchiverError):
    """Base exception for all client errors."""

    pass


class ConnectionError(ClientError):
    """Raised when a network connection fails after all retries."""

    pass


class APIError(ClientError):
    """Raised when the server returns a non-2xx response."""

    def __init__(self, message: str, status_code: int, *args, **kwargs):
        self.status_code = status_code
        super().__init__(message, *args, **kwargs)


class RateLimitError(APIError):
    """Raised on a 429 response."""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, status_code=429)


class NotFoundError(APIError):
    """Raised on a 404 response."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)

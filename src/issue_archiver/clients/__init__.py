"""Network clients for fetching content pages."""

from .client import Client
from .exceptions import (
    APIError,
    ClientError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
)
from .page_client import PageClient

__all__ = [
    "Client",
    "PageClient",
    "ClientError",
    "ConnectionError",
    "APIError",
    "RateLimitError",
    "NotFoundError",
]

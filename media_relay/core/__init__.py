"""Core transport primitives."""

from .http_client import HttpClient, HttpRequest, HttpResponse, SessionProvider
from .rate_limiter import RateLimitBackoff

__all__ = [
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "RateLimitBackoff",
    "SessionProvider",
]

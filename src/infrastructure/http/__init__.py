"""Provider HTTP transport."""

from src.infrastructure.http.http_client import (
    HTTPClient,
    HTTPResponse,
    sanitize_headers,
    truncate_body,
)

__all__ = ["HTTPClient", "HTTPResponse", "sanitize_headers", "truncate_body"]

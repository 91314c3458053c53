"""Custom exception hierarchy for the CORS proxy."""

import json
from typing import Any

from fastapi import Response

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


class ProxyError(Exception):
    """Base exception for all proxy errors.

    Attributes:
        message: Human-readable description of the failure
        status_code: HTTP status returned to the caller
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        return {"error": "Proxy error", "message": self.message}


class InvalidRequest(ProxyError):
    """Raised when the inbound path cannot be mapped to an upstream URL."""

    status_code = 400

    def payload(self) -> dict[str, Any]:
        return {"error": self.message}


class UpstreamUnreachable(ProxyError):
    """Raised when the upstream host cannot be reached.

    Attributes:
        url: Upstream URL that was attempted
    """

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url

    def payload(self) -> dict[str, Any]:
        return {"error": "Proxy error", "message": self.message, "url": self.url}


class InternalFailure(ProxyError):
    """Raised for any unexpected error while handling a request."""


def error_response(error: ProxyError) -> Response:
    """Render a proxy error as a compact JSON envelope."""
    return Response(
        content=json.dumps(error.payload(), separators=(",", ":")),
        status_code=error.status_code,
        media_type=JSON_MEDIA_TYPE,
    )

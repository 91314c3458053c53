"""Header filtering for upstream requests and client responses."""

import re
from collections.abc import Mapping

from core.config import DEFAULT_USER_AGENT
from core.request_types import ForwardingContext

ALLOW_HEADERS = (
    "accept-encoding",
    "accept-language",
    "accept",
    "access-control-allow-origin",
    "authorization",
    "cache-control",
    "connection",
    "content-length",
    "content-type",
    "dnt",
    "pragma",
    "range",
    "referer",
    "user-agent",
    "x-authorization",
    "x-http-method-override",
    "x-requested-with",
)

EXPOSE_HEADERS = (
    "accept-ranges",
    "age",
    "cache-control",
    "content-length",
    "content-language",
    "content-type",
    "date",
    "etag",
    "expires",
    "last-modified",
    "pragma",
    "server",
    "transfer-encoding",
    "vary",
    "x-github-request-id",
    "x-redirected-url",
)

# Streamed bodies get their length from the server, not from upstream.
_NOT_COPIED = frozenset({"content-length"})

_GIT_AGENT = re.compile(r"^git/", re.IGNORECASE)


def cors_headers() -> dict[str, str]:
    """Headers sent on every preflight and proxied response."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
        "Access-Control-Allow-Headers": ", ".join(ALLOW_HEADERS),
        "Access-Control-Expose-Headers": ", ".join(EXPOSE_HEADERS),
        "Access-Control-Max-Age": "86400",
    }


class HeaderBuilder:
    """Build upstream request headers and client response headers."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.user_agent = user_agent

    def build_upstream_headers(
        self,
        headers: Mapping[str, str],
        context: ForwardingContext,
    ) -> dict[str, str]:
        """Copy allowlisted headers and add forwarding context.

        `headers` must do case-insensitive lookups (Starlette and httpx
        header objects both do). `Host` is never copied.
        """
        upstream: dict[str, str] = {}
        for name in ALLOW_HEADERS:
            value = headers.get(name)
            if value is not None:
                upstream[name] = value

        upstream["x-forwarded-proto"] = context.proto.rstrip(":")
        upstream["x-forwarded-for"] = context.forwarded_for or "0.0.0.0"
        upstream["x-forwarded-host"] = context.host

        agent = upstream.get("user-agent")
        if not agent or not _GIT_AGENT.match(agent):
            upstream["user-agent"] = self.user_agent
        return upstream

    def build_response_headers(
        self,
        headers: Mapping[str, str],
        redirected_url: str | None = None,
    ) -> dict[str, str]:
        """CORS headers plus the exposed subset of upstream headers."""
        response = cors_headers()
        for name in EXPOSE_HEADERS:
            if name in _NOT_COPIED:
                continue
            value = headers.get(name)
            if value is not None:
                response[name] = value

        if redirected_url:
            response["x-redirected-url"] = redirected_url
        return response

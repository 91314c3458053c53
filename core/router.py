"""Request translation - maps inbound paths to upstream targets."""

import re

from core.exceptions import InvalidRequest
from core.request_types import Target

_PATH_PATTERN = re.compile(r"([^/]+)/?(.*)")


class TargetResolver:
    """Turn `/{domain}/{remainder}` paths into HTTPS upstream targets."""

    def resolve(self, path: str, query: str = "") -> Target:
        """Return the target for a raw request path and query string.

        The first path segment is the upstream host, the rest is passed
        through as-is. The query string is appended verbatim.
        """
        path = path.removeprefix("/")
        if not path:
            raise InvalidRequest("Invalid proxy URL format")

        match = _PATH_PATTERN.search(path)
        if match is None:
            raise InvalidRequest("Invalid path format")

        domain, remainder = match.group(1), match.group(2) or ""
        return Target(domain=domain, remainder=remainder, query=self._search(query))

    @staticmethod
    def _search(query: str) -> str:
        """Render a raw query string the way `URL.search` does."""
        query = query.removeprefix("?")
        return f"?{query}" if query else ""

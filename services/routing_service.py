"""Routing orchestration for proxy requests."""

from collections.abc import Mapping

from core.headers import HeaderBuilder
from core.request_types import ForwardingContext, PreparedRequest
from core.router import TargetResolver


class RoutingService:
    """Prepare inbound requests for forwarding upstream."""

    def __init__(
        self,
        resolver: TargetResolver,
        header_builder: HeaderBuilder,
    ) -> None:
        self._resolver = resolver
        self._headers = header_builder

    def prepare(
        self,
        method: str,
        path: str,
        query: str,
        headers: Mapping[str, str],
        context: ForwardingContext,
    ) -> PreparedRequest:
        """Resolve the target URL and filter headers for the upstream call."""
        target = self._resolver.resolve(path, query)
        upstream_headers = self._headers.build_upstream_headers(headers, context)
        return PreparedRequest(method, target.url, upstream_headers)

"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from core.config import Config
from core.headers import cors_headers
from core.protocols import RequestLogger
from core.request_types import ForwardingContext
from ui.log_utils import write_request_log


def forwarding_context(request: Request) -> ForwardingContext:
    """Describe the original caller for X-Forwarded-* headers."""
    return ForwardingContext(
        proto=request.url.scheme,
        forwarded_for=request.headers.get("x-forwarded-for"),
        host=request.url.netloc,
    )


def raw_path(request: Request) -> str:
    """Request path with its original percent-encoding."""
    raw = request.scope.get("raw_path")
    if raw:
        return raw.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


async def handle_preflight(_request: Request) -> Response:
    """Answer CORS preflight without contacting upstream."""
    return Response(status_code=200, headers=cors_headers())


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response | StreamingResponse:
    """Forward any non-preflight request to the host named in its path."""
    if request.method == "OPTIONS":
        return await handle_preflight(request)

    routing_service = request.app.state.routing_service
    prepared = routing_service.prepare(
        request.method,
        raw_path(request),
        request.url.query,
        request.headers,
        forwarding_context(request),
    )

    if config.proxy.debug:
        write_request_log(prepared.method, prepared.target_url, prepared.headers)

    upstream = request.app.state.upstream_client
    return await upstream.relay(prepared, request.stream(), logger)

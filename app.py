"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.exceptions import InternalFailure, InvalidRequest, ProxyError, error_response
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.router import TargetResolver
from services.routing_service import RoutingService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    `transport` replaces the network layer of the upstream client (tests).
    """
    header_builder = HeaderBuilder(user_agent=config.upstream.user_agent)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client, header_builder)
        app.state.routing_service = RoutingService(
            resolver=TargetResolver(),
            header_builder=header_builder,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Git CORS Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(_request: Request, exc: ProxyError):
        return error_response(exc)

    async def proxy(request: Request):
        try:
            return await handle_proxy(request, config, logger)
        except InvalidRequest as e:
            logger.log_error(None, e.status_code, e.message)
            raise
        except ProxyError:
            raise
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.log_error(None, 500, message)
            raise InternalFailure(message) from e

    # No method list: every verb, WebDAV included, reaches the proxy.
    app.add_route("/{path:path}", proxy, include_in_schema=False)

    return app

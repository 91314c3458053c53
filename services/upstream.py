"""HTTP proxying utilities for upstream requests."""

from collections.abc import AsyncIterator

import httpx
from fastapi.responses import StreamingResponse

from core.exceptions import UpstreamUnreachable
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import PreparedRequest

BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class UpstreamClient:
    """Proxy requests to upstream hosts with streaming support."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        header_builder: HeaderBuilder,
    ) -> None:
        self._client = client
        self._headers = header_builder

    async def relay(
        self,
        prepared: PreparedRequest,
        body: AsyncIterator[bytes] | None,
        logger: RequestLogger,
    ) -> StreamingResponse:
        """Send the prepared request and stream the final response back.

        Redirects are followed by the client. Transport failures raise
        UpstreamUnreachable carrying the attempted URL.
        """
        url = prepared.target_url
        logger.log_request(prepared.method, url)

        content = None if prepared.method in BODYLESS_METHODS else body
        try:
            req = self._client.build_request(
                prepared.method,
                url,
                headers=prepared.headers,
                content=content,
            )
            response = await self._client.send(req, stream=True)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            message = str(e) or type(e).__name__
            logger.log_error(url, 500, message)
            raise UpstreamUnreachable(message, url) from e

        redirected_url = str(response.url) if response.history else None
        logger.log_response(
            prepared.method,
            url,
            response.status_code,
            response.reason_phrase,
            redirected_url=redirected_url,
        )

        # ASGI carries no reason phrase; the server writes the standard one.
        return StreamingResponse(
            self._stream(response, url, logger),
            status_code=response.status_code,
            headers=self._headers.build_response_headers(response.headers, redirected_url),
        )

    async def _stream(
        self,
        response: httpx.Response,
        url: str,
        logger: RequestLogger,
    ) -> AsyncIterator[bytes]:
        """Yield upstream body chunks, closing the response when done or abandoned."""
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            # Status is already sent; the client sees a truncated body.
            logger.log_error(url, response.status_code, f"Stream interrupted: {e}")
            raise
        finally:
            await response.aclose()

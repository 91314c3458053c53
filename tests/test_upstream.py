import httpx
import pytest

from core.exceptions import UpstreamUnreachable
from core.headers import HeaderBuilder
from core.request_types import PreparedRequest
from services.upstream import UpstreamClient


async def _collect(response) -> bytes:
    chunks = []
    async for chunk in response.body_iterator:
        chunks.append(chunk)
    return b"".join(chunks)


async def _body(*parts: bytes):
    for part in parts:
        yield part


@pytest.mark.asyncio
async def test_relay_streams_request_and_response(logger):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(201, content=b"stored", headers={"server": "upstream"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        upstream = UpstreamClient(client, HeaderBuilder())
        prepared = PreparedRequest("PUT", "https://example.com/blob", {"content-type": "text/plain"})

        response = await upstream.relay(prepared, _body(b"part1-", b"part2"), logger)
        body = await _collect(response)

    assert seen == [b"part1-part2"]
    assert response.status_code == 201
    assert body == b"stored"
    assert response.headers["server"] == "upstream"
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_relay_ignores_body_for_get(logger):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(200)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        upstream = UpstreamClient(client, HeaderBuilder())
        prepared = PreparedRequest("GET", "https://example.com/", {})

        response = await upstream.relay(prepared, _body(b"ignored"), logger)
        await _collect(response)

    assert seen == [b""]


@pytest.mark.asyncio
async def test_invalid_url_is_reported_as_unreachable(logger):
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200))) as client:
        upstream = UpstreamClient(client, HeaderBuilder())
        prepared = PreparedRequest("GET", "https://example.com:abc/", {})

        with pytest.raises(UpstreamUnreachable) as exc_info:
            await upstream.relay(prepared, None, logger)

    assert exc_info.value.url == "https://example.com:abc/"
    assert exc_info.value.payload()["error"] == "Proxy error"
    assert logger.errors[0][0] == "https://example.com:abc/"


@pytest.mark.asyncio
async def test_stream_error_is_logged_and_raised(logger):
    class BrokenStream(httpx.AsyncByteStream):
        async def __aiter__(self):
            yield b"partial"
            raise httpx.ReadError("connection reset")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=BrokenStream())

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        upstream = UpstreamClient(client, HeaderBuilder())
        prepared = PreparedRequest("GET", "https://example.com/big.pack", {})

        response = await upstream.relay(prepared, None, logger)
        with pytest.raises(httpx.ReadError):
            await _collect(response)

    assert logger.errors == [
        ("https://example.com/big.pack", 200, "Stream interrupted: connection reset")
    ]

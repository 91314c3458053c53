from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps events in memory."""

    def __init__(self):
        self.requests: list[tuple[str, str]] = []
        self.responses: list[tuple[str, str, int, str, str | None]] = []
        self.errors: list[tuple[str | None, int, str]] = []

    def log_request(self, method, url):
        self.requests.append((method, url))

    def log_response(self, method, url, status, reason, *, redirected_url=None):
        self.responses.append((method, url, status, reason, redirected_url))

    def log_error(self, url, status, message):
        self.errors.append((url, status, message))


@pytest.fixture()
def logger():
    return RecordingLogger()


@pytest.fixture()
def captured():
    """Upstream requests seen by the mock transport."""
    return []


@pytest.fixture()
def make_client(logger, captured):
    """Build a TestClient whose upstream is answered by `handler`."""
    clients = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        config: Config | None = None,
    ) -> TestClient:
        def _record(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return handler(request)

        app = create_app(config or Config(), logger, transport=httpx.MockTransport(_record))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)

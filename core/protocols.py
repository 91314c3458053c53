"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_request(self, method: str, url: str) -> None: ...
    def log_response(
        self,
        method: str,
        url: str,
        status: int,
        reason: str,
        *,
        redirected_url: str | None = None,
    ) -> None: ...
    def log_error(self, url: str | None, status: int, message: str) -> None: ...

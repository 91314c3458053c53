"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Target:
    """Upstream target parsed from the inbound path."""

    domain: str
    remainder: str
    query: str = ""

    @property
    def url(self) -> str:
        return f"https://{self.domain}/{self.remainder}{self.query}"


@dataclass(frozen=True)
class ForwardingContext:
    """What the upstream cannot see about the original caller."""

    proto: str
    forwarded_for: str | None
    host: str


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    method: str
    target_url: str
    headers: dict[str, str]

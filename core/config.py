"""Configuration models and loading."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, field_validator

DEFAULT_PORT = 3000
DEFAULT_TIMEOUT = 300.0
DEFAULT_USER_AGENT = "git/@isomorphic-git/cors-proxy (python)"

_TRUTHY = {"1", "true", "yes", "on"}


class ProxySettings(BaseModel):
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    debug: bool = False

    @field_validator("port", mode="before")
    @classmethod
    def _fallback_port(cls, value: object) -> int:
        """Missing, non-numeric or out-of-range ports fall back to the default."""
        try:
            port = int(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_PORT
        if not 0 < port < 65536:
            return DEFAULT_PORT
        return port

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, value: object) -> bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY


class UpstreamSettings(BaseModel):
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("timeout", mode="before")
    @classmethod
    def _fallback_timeout(cls, value: object) -> float:
        try:
            timeout = float(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_TIMEOUT
        return timeout if timeout > 0 else DEFAULT_TIMEOUT


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build configuration from environment variables."""
    env = os.environ if environ is None else environ

    proxy: dict[str, object] = {}
    upstream: dict[str, object] = {}
    if "PORT" in env:
        proxy["port"] = env["PORT"]
    if env.get("HOST"):
        proxy["host"] = env["HOST"]
    if "PROXY_DEBUG" in env:
        proxy["debug"] = env["PROXY_DEBUG"]
    if env.get("PROXY_USER_AGENT"):
        upstream["user_agent"] = env["PROXY_USER_AGENT"]
    if "UPSTREAM_TIMEOUT" in env:
        upstream["timeout"] = env["UPSTREAM_TIMEOUT"]

    return Config.model_validate({"proxy": proxy, "upstream": upstream})

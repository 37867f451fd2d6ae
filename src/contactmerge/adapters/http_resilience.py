"""Async HTTP client with retries and client-side rate limiting.

Retries are delegated to ``httpx_retries.RetryTransport`` wrapped around the
real (or test) transport; the rate limit is an ``aiolimiter.AsyncLimiter``
shared by every request issued through one ``ResilientClient``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    backoff_jitter: float = 1.0
    respect_retry_after_header: bool = True
    # bulk deletes go through PUT, so POST (create) is the only verb never retried
    allowed_methods: frozenset[str] = frozenset({"DELETE", "GET", "HEAD", "PUT"})
    status_forcelist: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    def build(self) -> Retry:
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            backoff_jitter=self.backoff_jitter,
            respect_retry_after_header=self.respect_retry_after_header,
            allowed_methods=sorted(self.allowed_methods),
            status_forcelist=sorted(self.status_forcelist),
            retry_on_exceptions=self.retry_on_exceptions,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float

    def limiter(self) -> AsyncLimiter:
        return AsyncLimiter(self.max_calls, self.per_seconds)


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Connection settings for one remote API."""

    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None


class ResilientClient:
    """Thin ``httpx.AsyncClient`` wrapper used by every remote adapter.

    ``transport`` replaces the network transport underneath the retry layer,
    which is how tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.limiter = config.ratelimit.limiter() if config.ratelimit else None
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            timeout=config.timeout_seconds,
            headers=dict(config.default_headers or {}),
            transport=RetryTransport(transport=transport, retry=config.retry.build()),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: Mapping[str, str | int] | None = None,
    ) -> httpx.Response:
        if self.limiter is None:
            response = await self._client.request(method, url, json=json, params=params)
        else:
            async with self.limiter:
                response = await self._client.request(method, url, json=json, params=params)
        log.debug("[%s] %s %s -> %d", self.config.name, method, url, response.status_code)
        return response

    async def get(
        self, url: str, *, params: Mapping[str, str | int] | None = None
    ) -> httpx.Response:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, *, json: Any = None) -> httpx.Response:
        return await self.request("POST", url, json=json)

    async def put(self, url: str, *, json: Any = None) -> httpx.Response:
        return await self.request("PUT", url, json=json)

    async def delete(self, url: str) -> httpx.Response:
        return await self.request("DELETE", url)

"""HTTP transport for provider endpoints, with a single-attempt aiohttp implementation."""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp


logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for provider-side failures."""
    pass


class TransportError(ProviderError):
    """Network error, timeout or non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class EnvelopeError(ProviderError):
    """Response body is not a usable ``{success, data}`` envelope."""
    pass


class RecordParseError(ProviderError):
    """A single entry inside a valid payload could not be parsed."""
    pass


@dataclass
class HttpRequest:
    """Represents a single provider request."""
    method: str
    url: str
    headers: Dict[str, str]
    params: Optional[Dict[str, str]] = None
    json_body: Optional[Dict[str, Any]] = None
    timeout: float = 10.0


@dataclass
class HttpResponse:
    """Raw provider response."""
    status: int
    body: str
    latency_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except (json.JSONDecodeError, TypeError) as e:
            raise EnvelopeError(f"Response is not valid JSON: {e}") from e


class HttpTransport(ABC):
    """Abstract base class for HTTP transports."""

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """
        Send one request and return the raw response.

        Implementations raise TransportError for network failures and timeouts
        and return non-2xx responses as-is.
        """
        pass

    async def close(self) -> None:
        """Release any pooled connections."""
        pass


class AiohttpTransport(HttpTransport):
    """
    aiohttp-backed transport.

    A session is created lazily and reused across requests; each request gets
    its own total timeout. No retries are made.
    """

    def __init__(self, max_connections: int = 10, session: Optional[aiohttp.ClientSession] = None):
        self.max_connections = max_connections
        self._session = session
        self._owns_session = session is None
        self._lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._lock:
            if self._session is None or self._session.closed:
                connector = aiohttp.TCPConnector(limit=self.max_connections)
                self._session = aiohttp.ClientSession(connector=connector)
                self._owns_session = True
            return self._session

    async def send(self, request: HttpRequest) -> HttpResponse:
        session = await self._get_session()
        start_time = time.time()

        try:
            async with session.request(
                request.method,
                request.url,
                headers=request.headers,
                params=request.params or None,
                json=request.json_body,
                timeout=aiohttp.ClientTimeout(total=request.timeout),
            ) as response:
                body = await response.text()
                latency_ms = (time.time() - start_time) * 1000
                return HttpResponse(status=response.status, body=body, latency_ms=latency_ms)

        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out after {request.timeout}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}") from e

    async def close(self) -> None:
        if self._session and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP session closed")

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

"""
Provider client: one remote endpoint, one request, one outcome.

``ProviderClient.fetch`` never raises. Every failure mode (transport error,
timeout, non-2xx, bad JSON, failed or mis-shaped envelope) becomes an
``Unavailable`` outcome; malformed entries inside a valid array are skipped.
"""

import asyncio
import logging
import time
from typing import Optional

from ..models import ProviderOutcome, RequestContext, Success, Unavailable
from .catalog import ProviderSpec
from .envelope import PayloadShape, require_shape, unwrap_envelope
from .parsers import parse_entries
from .transport import HttpRequest, HttpTransport, ProviderError, TransportError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ProviderClient:
    """Wraps a single collection endpoint."""

    def __init__(
        self,
        spec: ProviderSpec,
        transport: HttpTransport,
        base_url: str = "",
        default_timeout: float = DEFAULT_TIMEOUT,
    ):
        if spec.shape is PayloadShape.SUBJECT_OBJECT:
            raise ValueError(f"Provider {spec.name} must return a collection, not a single object")
        self.spec = spec
        self.transport = transport
        self.base_url = base_url
        self.timeout = spec.timeout or default_timeout

    @property
    def name(self) -> str:
        return self.spec.name

    def build_request(self, context: RequestContext) -> HttpRequest:
        params = {**self.spec.params, **context.query_params()}
        if self.spec.method == "POST":
            return HttpRequest(
                method="POST",
                url=self.spec.url(self.base_url),
                headers=context.headers(),
                json_body=params or None,
                timeout=self.timeout,
            )
        return HttpRequest(
            method="GET",
            url=self.spec.url(self.base_url),
            headers=context.headers(),
            params=params or None,
            timeout=self.timeout,
        )

    async def fetch(self, context: RequestContext) -> ProviderOutcome:
        """
        Fetch this provider's subjects.

        Args:
            context: Caller session (token, academic year)

        Returns:
            Success with the parsed records, or Unavailable with a reason
        """
        start_time = time.time()

        try:
            response = await self._send(context)
            if not response.ok:
                raise TransportError(f"HTTP {response.status}", status=response.status)

            data = unwrap_envelope(response.json(), self.spec.data_key)
            entries = require_shape(data, self.spec.shape)
            records, skipped = parse_entries(entries, self.spec.shape, self.name)

        except ProviderError as e:
            return self._unavailable(str(e), start_time, error_type=type(e).__name__)
        except Exception as e:
            logger.exception(f"Unexpected error fetching provider {self.name}")
            return self._unavailable(f"Unexpected error: {e}", start_time, error_type=type(e).__name__)

        logger.info(
            f"Provider {self.name} returned {len(records)} subjects",
            extra={
                "provider": self.name,
                "records": len(records),
                "skipped": skipped,
                "latency_ms": (time.time() - start_time) * 1000,
            }
        )
        return Success(provider=self.name, records=tuple(records), skipped=skipped)

    async def _send(self, context: RequestContext):
        """Send the request, bounding it by this provider's timeout."""
        try:
            return await asyncio.wait_for(
                self.transport.send(self.build_request(context)),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout}s") from e

    def _unavailable(self, reason: str, start_time: float, error_type: Optional[str] = None) -> Unavailable:
        logger.warning(
            f"Provider {self.name} unavailable: {reason}",
            extra={
                "provider": self.name,
                "error_type": error_type,
                "latency_ms": (time.time() - start_time) * 1000,
            }
        )
        return Unavailable(provider=self.name, reason=reason)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, timeout={self.timeout})"

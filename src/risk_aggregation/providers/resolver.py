"""
Single-subject lookups against an ordered list of mirror endpoints.

Unlike collection aggregation, the first structurally valid answer is
authoritative: endpoints are tried one at a time and the remaining ones are
never called once one succeeds. Nothing is merged across endpoints. A profile
without an id belongs to the requested subject; a profile for another subject
counts as a failed endpoint.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from ..models import RequestContext, SubjectRecord
from .client import DEFAULT_TIMEOUT
from .envelope import PayloadShape, require_shape, unwrap_envelope
from .parsers import parse_single
from .transport import HttpRequest, HttpTransport, ProviderError, TransportError


logger = logging.getLogger(__name__)


class EndpointFallbackResolver:
    """Resolves one subject by trying candidate endpoints in order."""

    def __init__(
        self,
        transport: HttpTransport,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.transport = transport
        self.base_url = base_url
        self.timeout = timeout

    def endpoint_url(self, template: str, subject_id: int) -> str:
        path = template.format(subject_id=subject_id)
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def resolve(
        self,
        subject_id: int,
        endpoints: Sequence[str],
        context: Optional[RequestContext] = None,
    ) -> Optional[SubjectRecord]:
        """
        Resolve a subject's detail record.

        Args:
            subject_id: Subject to look up
            endpoints: Ordered endpoint templates containing ``{subject_id}``
            context: Caller session; an empty context is used when omitted

        Returns:
            The record from the first endpoint that answers with a valid
            envelope, or None once every endpoint has failed
        """
        context = context or RequestContext()
        failures: List[str] = []

        for position, template in enumerate(endpoints, start=1):
            try:
                url = self.endpoint_url(template, subject_id)
            except (KeyError, IndexError, ValueError) as e:
                failures.append(f"{template}: bad template ({e})")
                continue

            record = await self._try_endpoint(url, subject_id, context, failures)
            if record is not None:
                logger.info(
                    f"Resolved subject {subject_id} from endpoint {position}/{len(endpoints)}",
                    extra={"subject_id": subject_id, "endpoint": url, "attempts": position}
                )
                return record

        logger.warning(
            f"Could not resolve subject {subject_id} from {len(endpoints)} endpoints",
            extra={"subject_id": subject_id, "failures": failures}
        )
        return None

    async def _try_endpoint(
        self,
        url: str,
        subject_id: int,
        context: RequestContext,
        failures: List[str],
    ) -> Optional[SubjectRecord]:
        start_time = time.time()
        request = HttpRequest(
            method="GET",
            url=url,
            headers=context.headers(),
            params=context.query_params() or None,
            timeout=self.timeout,
        )

        try:
            try:
                response = await asyncio.wait_for(self.transport.send(request), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                raise TransportError(f"Request timed out after {self.timeout}s") from e

            if not response.ok:
                raise TransportError(f"HTTP {response.status}", status=response.status)

            data = unwrap_envelope(response.json())
            payload = require_shape(data, PayloadShape.SUBJECT_OBJECT)

        except ProviderError as e:
            failures.append(f"{url}: {e}")
            logger.debug(
                f"Endpoint {url} failed for subject {subject_id}: {e}",
                extra={"latency_ms": (time.time() - start_time) * 1000}
            )
            return None
        except Exception as e:
            failures.append(f"{url}: unexpected error ({e})")
            logger.exception(f"Unexpected error resolving subject {subject_id} from {url}")
            return None

        record = parse_single(payload, subject_id)
        if record is None:
            failures.append(f"{url}: payload is not a subject record")
            return None
        if record.subject_id != subject_id:
            failures.append(f"{url}: answered for subject {record.subject_id}")
            logger.warning(
                f"Endpoint {url} answered for subject {record.subject_id} instead of {subject_id}",
                extra={"subject_id": subject_id, "endpoint": url}
            )
            return None
        return record

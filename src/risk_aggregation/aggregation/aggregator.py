"""
Concurrent multi-provider aggregation.

This module implements the collection path of the layer: fan out to every
provider at once, wait for all of them, then merge their subjects in provider
priority order. When nothing usable comes back, an optional raw incident-log
provider is tried as a salvage source and, failing that, the built-in degraded
dataset is returned so the caller always has something to render.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from ..models import (
    AggregateResult,
    ProviderOutcome,
    RequestContext,
    SubjectRecord,
    Unavailable,
)
from ..providers import (
    HttpTransport,
    ProviderCatalog,
    ProviderClient,
    DEFAULT_TIMEOUT,
)
from .classifier import classify
from .degraded import default_dataset


logger = logging.getLogger(__name__)


class AggregatorConfig(BaseModel):
    """Configuration for an aggregation cycle."""
    classify_records: bool = True
    enable_salvage: bool = True


def merge_outcomes(outcomes: Sequence[ProviderOutcome]) -> Dict[int, SubjectRecord]:
    """
    Merge provider outcomes in the given (priority) order.

    A later provider's record replaces an earlier one for the same subject id
    outright, with no field-level union. The subject keeps the position at
    which it was first inserted.
    """
    merged: Dict[int, SubjectRecord] = {}
    for outcome in outcomes:
        if not outcome.ok:
            continue
        for record in outcome.records:
            merged[record.subject_id] = record
    return merged


class Aggregator:
    """
    Builds an AggregateResult from an ordered set of provider clients.

    Providers share no state and the result mapping has a single writer, so
    the only concurrency is the fan-out itself.
    """

    def __init__(
        self,
        config: Optional[AggregatorConfig] = None,
        logger_instance: Optional[logging.Logger] = None
    ):
        self.config = config or AggregatorConfig()
        self.logger = logger_instance or logger

    async def aggregate(
        self,
        providers: Sequence[ProviderClient],
        context: Optional[RequestContext] = None,
        salvage: Optional[ProviderClient] = None,
    ) -> AggregateResult:
        """
        Run one aggregation cycle.

        Args:
            providers: Provider clients, most authoritative first
            context: Caller session passed to every provider
            salvage: Optional raw incident-log provider, only queried when the
                primary providers contributed no subjects

        Returns:
            AggregateResult; never raises
        """
        context = context or RequestContext()
        start_time = time.time()

        outcomes = await self._fetch_all(providers, context)
        merged = merge_outcomes(outcomes)

        used_salvage = False
        if not merged and salvage is not None and self.config.enable_salvage:
            self.logger.info(f"No subjects from {len(providers)} providers, trying salvage provider {salvage.name}")
            salvage_outcome = await self._fetch_one(salvage, context)
            outcomes.append(salvage_outcome)
            merged = merge_outcomes([salvage_outcome])
            used_salvage = bool(merged)

        used_degraded = False
        if not merged:
            used_degraded = True
            merged = {record.subject_id: record for record in default_dataset()}
            self.logger.warning(
                "All providers failed or returned nothing, using degraded dataset",
                extra={
                    "providers": [o.provider for o in outcomes],
                    "reasons": [o.reason for o in outcomes if not o.ok],
                }
            )

        if self.config.classify_records:
            merged = {subject_id: classify(record) for subject_id, record in merged.items()}

        result = AggregateResult(
            records=merged,
            used_degraded_dataset=used_degraded,
            used_salvage_provider=used_salvage,
            outcomes=tuple(outcomes),
        )

        self.logger.info(
            f"Aggregation completed with {len(result)} subjects",
            extra={
                "subjects": len(result),
                "providers_ok": sum(1 for o in outcomes if o.ok),
                "providers_failed": len(result.failed_providers),
                "degraded": used_degraded,
                "salvage": used_salvage,
                "execution_time_ms": (time.time() - start_time) * 1000,
            }
        )
        return result

    async def _fetch_all(
        self,
        providers: Sequence[ProviderClient],
        context: RequestContext
    ) -> List[ProviderOutcome]:
        """Fetch every provider concurrently; outcomes keep the providers' order."""
        results = await asyncio.gather(
            *(provider.fetch(context) for provider in providers),
            return_exceptions=True
        )

        outcomes: List[ProviderOutcome] = []
        for provider, result in zip(providers, results):
            if isinstance(result, BaseException):
                self.logger.error(
                    f"Provider {provider.name} raised instead of returning an outcome: {result}",
                    extra={"provider": provider.name, "error_type": type(result).__name__}
                )
                outcomes.append(Unavailable(provider=provider.name, reason=str(result)))
            else:
                outcomes.append(result)
        return outcomes

    async def _fetch_one(self, provider: ProviderClient, context: RequestContext) -> ProviderOutcome:
        outcomes = await self._fetch_all([provider], context)
        return outcomes[0]


def build_clients(
    catalog: ProviderCatalog,
    transport: HttpTransport,
    base_url: str,
    default_timeout: float = DEFAULT_TIMEOUT,
):
    """
    Create provider clients for a catalog.

    Returns:
        Tuple of (primary clients in priority order, salvage client or None)
    """
    providers = [
        ProviderClient(spec, transport, base_url=base_url, default_timeout=default_timeout)
        for spec in catalog.providers
    ]
    salvage = None
    if catalog.salvage is not None:
        salvage = ProviderClient(catalog.salvage, transport, base_url=base_url, default_timeout=default_timeout)
    return providers, salvage

"""
Public entry points for callers (screens, controllers, schedulers).

SubjectAggregationService wires settings, the provider catalog and a shared
transport together and exposes the four caller operations: ``aggregate``,
``resolve``, ``classify`` and ``filter``.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from .aggregation import (
    Aggregator,
    AggregatorConfig,
    build_clients,
    classify,
    filter_records,
)
from .config import Settings
from .models import AggregateResult, RequestContext, RiskCategory, SubjectRecord
from .providers import (
    AiohttpTransport,
    EndpointFallbackResolver,
    HttpTransport,
    ProviderCatalog,
    default_catalog,
    load_catalog,
)


logger = logging.getLogger(__name__)


class SubjectAggregationService:
    """
    Caller-facing facade over the aggregation layer.

    Holds no per-caller state: every ``aggregate`` call returns a fresh
    AggregateResult owned by the caller.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[ProviderCatalog] = None,
        transport: Optional[HttpTransport] = None,
    ):
        self.settings = settings or Settings.load()
        provider_settings = self.settings.providers

        if catalog is None:
            if provider_settings.catalog_path:
                catalog = load_catalog(provider_settings.catalog_path)
            else:
                catalog = default_catalog()
        self.catalog = catalog

        self.transport = transport or AiohttpTransport(max_connections=provider_settings.max_connections)
        self.providers, self.salvage = build_clients(
            catalog,
            self.transport,
            base_url=provider_settings.base_url,
            default_timeout=provider_settings.default_timeout,
        )
        self.aggregator = Aggregator(
            AggregatorConfig(
                classify_records=self.settings.app.classify_records,
                enable_salvage=self.settings.app.enable_salvage,
            )
        )
        self.resolver = EndpointFallbackResolver(
            self.transport,
            base_url=provider_settings.base_url,
            timeout=provider_settings.default_timeout,
        )

    async def aggregate(self, context: Optional[RequestContext] = None) -> AggregateResult:
        """Aggregate the catalog's providers for a list view."""
        return await self.aggregator.aggregate(self.providers, context, salvage=self.salvage)

    async def resolve(
        self,
        subject_id: int,
        context: Optional[RequestContext] = None,
        endpoints: Optional[Sequence[str]] = None,
    ) -> Optional[SubjectRecord]:
        """Look up one subject's detail record from the catalog's mirror endpoints."""
        return await self.resolver.resolve(
            subject_id,
            endpoints if endpoints is not None else self.catalog.detail_endpoints,
            context,
        )

    @staticmethod
    def classify(record: SubjectRecord) -> SubjectRecord:
        return classify(record)

    @staticmethod
    def filter(
        records: Iterable[SubjectRecord],
        search_text: Optional[str] = "",
        category: Union[RiskCategory, str, None] = RiskCategory.ALL,
    ) -> List[SubjectRecord]:
        return filter_records(records, search_text, category)

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "SubjectAggregationService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


async def aggregate_subjects(
    context: Optional[RequestContext] = None,
    settings: Optional[Settings] = None,
    catalog: Optional[ProviderCatalog] = None,
    transport: Optional[HttpTransport] = None,
) -> AggregateResult:
    """One-shot aggregation with a short-lived service."""
    service = SubjectAggregationService(settings=settings, catalog=catalog, transport=transport)
    try:
        return await service.aggregate(context)
    finally:
        if transport is None:
            await service.close()

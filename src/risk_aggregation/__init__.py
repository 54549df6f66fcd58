"""
Risk Aggregation

A resilient aggregation layer that builds consolidated student risk views from
several unreliable remote providers, with deterministic risk classification
and a guaranteed degraded result when every provider fails.
"""

__version__ = "0.1.0"

from .models import (
    RiskLevel,
    RiskCategory,
    SubjectRecord,
    RequestContext,
    Success,
    Unavailable,
    ProviderOutcome,
    AggregateResult,
)
from .aggregation import (
    Aggregator,
    AggregatorConfig,
    AggregateViewState,
    classify,
    filter_records,
    risk_counts,
    default_dataset,
)
from .providers import ProviderClient, EndpointFallbackResolver
from .service import SubjectAggregationService, aggregate_subjects

__all__ = [
    "__version__",
    "RiskLevel",
    "RiskCategory",
    "SubjectRecord",
    "RequestContext",
    "Success",
    "Unavailable",
    "ProviderOutcome",
    "AggregateResult",
    "Aggregator",
    "AggregatorConfig",
    "AggregateViewState",
    "classify",
    "filter_records",
    "risk_counts",
    "default_dataset",
    "ProviderClient",
    "EndpointFallbackResolver",
    "SubjectAggregationService",
    "aggregate_subjects",
]

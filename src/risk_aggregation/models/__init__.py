"""
Data models for the aggregation layer.

This package contains:
- SubjectRecord and the risk tier enums
- Request context and provider outcome value objects
- The immutable AggregateResult snapshot
"""

from .records import (
    RiskLevel,
    RiskCategory,
    SubjectRecord,
    UNKNOWN_NAME,
    UNKNOWN_LABEL,
    DEFAULT_SCORE,
)
from .outcomes import (
    RequestContext,
    Success,
    Unavailable,
    ProviderOutcome,
    AggregateResult,
)

__all__ = [
    # Records
    "RiskLevel",
    "RiskCategory",
    "SubjectRecord",
    "UNKNOWN_NAME",
    "UNKNOWN_LABEL",
    "DEFAULT_SCORE",

    # Outcomes
    "RequestContext",
    "Success",
    "Unavailable",
    "ProviderOutcome",
    "AggregateResult",
]

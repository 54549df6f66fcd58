"""
Aggregation package for building subject risk views.

This package provides:
- Aggregator for concurrent fan-out and priority-ordered merging
- Deterministic risk classification
- View filtering and per-tier counts
- The built-in degraded dataset
- A caller-owned view state that ignores stale refreshes
"""

from .aggregator import Aggregator, AggregatorConfig, merge_outcomes, build_clients
from .classifier import RISK_THRESHOLDS, derive_risk_level, classify, classify_all
from .view_filter import RiskCounts, matches_search, filter_records, risk_counts
from .degraded import DEGRADED_ENTRIES, default_dataset
from .view_state import AggregateViewState

__all__ = [
    "Aggregator",
    "AggregatorConfig",
    "merge_outcomes",
    "build_clients",
    "RISK_THRESHOLDS",
    "derive_risk_level",
    "classify",
    "classify_all",
    "RiskCounts",
    "matches_search",
    "filter_records",
    "risk_counts",
    "DEGRADED_ENTRIES",
    "default_dataset",
    "AggregateViewState",
]

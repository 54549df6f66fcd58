"""
Value objects passed across the aggregation layer.

RequestContext carries the caller's session (token, academic year) into every
provider call so no provider reads global state. ProviderOutcome is what a
provider call yields instead of raising; AggregateResult is the immutable
snapshot handed back to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .records import SubjectRecord


@dataclass(frozen=True)
class RequestContext:
    """Caller-supplied session context, opaque to the aggregation logic."""
    token: Optional[str] = None
    academic_year_id: Optional[int] = None
    role: Optional[str] = None
    extra_params: Dict[str, str] = field(default_factory=dict)

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def query_params(self) -> Dict[str, str]:
        params = dict(self.extra_params)
        if self.academic_year_id is not None:
            params["academicYearId"] = str(self.academic_year_id)
        return params


@dataclass(frozen=True)
class Success:
    """A provider answered with a valid envelope."""
    provider: str
    records: Tuple[SubjectRecord, ...]
    skipped: int = 0

    ok = True


@dataclass(frozen=True)
class Unavailable:
    """A provider could not contribute (transport, status or envelope failure)."""
    provider: str
    reason: str

    ok = False


ProviderOutcome = Union[Success, Unavailable]


class AggregateResult:
    """
    Merged subjects keyed by subject id, in merge order.

    The mapping is exposed read-only; a new result is built on every
    aggregation cycle.
    """

    def __init__(
        self,
        records: Dict[int, SubjectRecord],
        used_degraded_dataset: bool = False,
        used_salvage_provider: bool = False,
        outcomes: Tuple[ProviderOutcome, ...] = (),
        completed_at: Optional[datetime] = None,
    ):
        self._records = dict(records)
        self.records: Mapping[int, SubjectRecord] = MappingProxyType(self._records)
        self.used_degraded_dataset = used_degraded_dataset
        self.used_salvage_provider = used_salvage_provider
        self.outcomes = tuple(outcomes)
        self.completed_at = completed_at or datetime.now()

    def subjects(self) -> List[SubjectRecord]:
        """Records in merge order."""
        return list(self._records.values())

    def get(self, subject_id: int) -> Optional[SubjectRecord]:
        return self._records.get(subject_id)

    @property
    def failed_providers(self) -> List[str]:
        return [o.provider for o in self.outcomes if not o.ok]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SubjectRecord]:
        return iter(self._records.values())

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._records

    def __repr__(self) -> str:
        return (
            f"AggregateResult(subjects={len(self._records)}, "
            f"degraded={self.used_degraded_dataset}, salvage={self.used_salvage_provider})"
        )

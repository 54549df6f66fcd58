"""
Client-side filtering of classified subjects.

Filtering never re-orders: output follows the order subjects were merged into
the AggregateResult, so re-filtering on every keystroke is stable and
idempotent.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from ..models import RiskCategory, RiskLevel, SubjectRecord
from .classifier import classify


@dataclass(frozen=True)
class RiskCounts:
    """Per-tab badge counts; ``low`` includes unclassified subjects."""
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low


def matches_search(record: SubjectRecord, search_text: Optional[str]) -> bool:
    """Case-insensitive substring match on name and identifier code."""
    query = (search_text or "").strip().lower()
    if not query:
        return True
    return query in record.display_name.lower() or query in record.identifier_code.lower()


def filter_records(
    records: Iterable[SubjectRecord],
    search_text: Optional[str] = "",
    category: Union[RiskCategory, str, None] = RiskCategory.ALL,
) -> List[SubjectRecord]:
    """
    Select the subjects a view renders.

    Args:
        records: Subjects in merge order
        search_text: Free text matched against name and identifier code
        category: Risk tab (enum member, ``"high"`` or ``"high-risk"`` style id)

    Raises:
        ValueError: if ``category`` names no known tab

    Returns:
        Matching records, in input order
    """
    tab = RiskCategory.parse(category)
    selected = []
    for record in records:
        if not matches_search(record, search_text):
            continue
        if tab.accepts(classify(record).risk_level):
            selected.append(record)
    return selected


def risk_counts(records: Iterable[SubjectRecord]) -> RiskCounts:
    high = medium = low = 0
    for record in records:
        level = classify(record).risk_level
        if level is RiskLevel.HIGH:
            high += 1
        elif level is RiskLevel.MEDIUM:
            medium += 1
        else:
            low += 1
    return RiskCounts(high=high, medium=medium, low=low)

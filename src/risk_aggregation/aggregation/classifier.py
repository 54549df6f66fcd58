"""Deterministic risk classification from a record's behavior counters."""

from typing import Iterable, List

from ..models import RiskLevel, SubjectRecord


# (score below, total events at least, recent events at least), first match wins
RISK_THRESHOLDS = (
    (RiskLevel.HIGH, 50, 5, 3),
    (RiskLevel.MEDIUM, 70, 3, 2),
    (RiskLevel.LOW, 85, 1, 1),
)


def derive_risk_level(score: int, total_events: int, recent_events: int) -> RiskLevel:
    """Compute a risk tier from raw counters."""
    for level, score_below, total_at_least, recent_at_least in RISK_THRESHOLDS:
        if score < score_below or total_events >= total_at_least or recent_events >= recent_at_least:
            return level
    return RiskLevel.NONE


def classify(record: SubjectRecord) -> SubjectRecord:
    """
    Fill in a record's risk level when its source left it unclassified.

    A source-provided level other than NONE is always trusted and the record
    is returned unchanged.
    """
    if record.risk_level is not RiskLevel.NONE:
        return record

    level = derive_risk_level(record.score, record.total_events, record.recent_events)
    if level is RiskLevel.NONE:
        return record
    return record.model_copy(update={"risk_level": level})


def classify_all(records: Iterable[SubjectRecord]) -> List[SubjectRecord]:
    return [classify(record) for record in records]

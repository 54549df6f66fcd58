"""
Built-in substitute dataset used when no provider contributed a subject.

The entries mirror what the discipline office endpoints return so that views
render identically offline. Keep them valid SubjectRecords.
"""

from typing import Any, Dict, List

from ..models import SubjectRecord


DEGRADED_ENTRIES: List[Dict[str, Any]] = [
    {
        "subject_id": 1,
        "display_name": "John Doe",
        "identifier_code": "ST2024001",
        "group_label": "Form 1",
        "subgroup_label": "Form 1A",
        "risk_level": "HIGH",
        "score": 45,
        "total_events": 6,
        "recent_events": 3,
        "intervention_count": 2,
        "last_event_date": "2024-03-15",
    },
    {
        "subject_id": 2,
        "display_name": "Jane Smith",
        "identifier_code": "ST2024002",
        "group_label": "Form 2",
        "subgroup_label": "Form 2B",
        "risk_level": "MEDIUM",
        "score": 65,
        "total_events": 3,
        "recent_events": 1,
        "intervention_count": 1,
        "last_event_date": "2024-03-12",
    },
    {
        "subject_id": 3,
        "display_name": "Mike Johnson",
        "identifier_code": "ST2024003",
        "group_label": "Form 1",
        "subgroup_label": "Form 1A",
        "risk_level": "LOW",
        "score": 80,
        "total_events": 1,
        "recent_events": 0,
        "intervention_count": 0,
        "last_event_date": "2024-02-28",
    },
    {
        "subject_id": 4,
        "display_name": "Sarah Wilson",
        "identifier_code": "ST2024004",
        "group_label": "Form 2",
        "subgroup_label": "Form 2A",
        "score": 95,
        "total_events": 0,
        "recent_events": 0,
        "intervention_count": 0,
    },
]


def default_dataset() -> List[SubjectRecord]:
    """Fresh records for the degraded view, in display order."""
    return [SubjectRecord(**entry) for entry in DEGRADED_ENTRIES]

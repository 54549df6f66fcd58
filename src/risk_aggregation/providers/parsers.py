"""
Payload parsers that turn provider entries into SubjectRecords.

Backends disagree on field names (``studentId`` vs ``id``, ``issueCount`` vs
``totalIncidents``); the alias tables below list every variant seen in the
wild, first match wins.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..models import SubjectRecord
from .envelope import PayloadShape
from .transport import RecordParseError


logger = logging.getLogger(__name__)


FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "subject_id": ("studentId", "id"),
    "display_name": ("studentName", "name"),
    "identifier_code": ("matricule", "studentMatricule"),
    "group_label": ("className",),
    "subgroup_label": ("subClassName", "subclassName"),
    "risk_level": ("riskLevel",),
    "score": ("behaviorScore",),
    "total_events": ("totalIncidents", "issueCount"),
    "recent_events": ("recentIncidents",),
    "intervention_count": ("interventionsReceived",),
    "last_event_date": ("lastIncidentDate", "lastIncident"),
}


def _pick(entry: Dict[str, Any], aliases: Sequence[str]) -> Any:
    """Return the first non-null value among the aliases."""
    for key in aliases:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def parse_subject(entry: Any) -> SubjectRecord:
    """
    Parse one subject-like entry.

    Raises:
        RecordParseError: if the entry is not an object or has no usable id
    """
    if not isinstance(entry, dict):
        raise RecordParseError(f"Entry must be an object, got {type(entry).__name__}")

    fields = {}
    for field_name, aliases in FIELD_ALIASES.items():
        value = _pick(entry, aliases)
        if value is not None:
            fields[field_name] = value

    if "subject_id" not in fields:
        raise RecordParseError("Entry has no subject id")

    try:
        return SubjectRecord(**fields)
    except ValidationError as e:
        raise RecordParseError(f"Invalid entry for subject {fields.get('subject_id')!r}: {e}") from e


def parse_incident(entry: Any) -> SubjectRecord:
    """
    Synthesize a minimal record from one raw incident.

    The incident names its student in a nested ``student`` object; every
    incident counts as one total and one recent event unless the student
    object says otherwise.
    """
    if not isinstance(entry, dict):
        raise RecordParseError(f"Incident must be an object, got {type(entry).__name__}")

    student = entry.get("student")
    if not isinstance(student, dict):
        raise RecordParseError("Incident has no student object")

    fields = {}
    for field_name, aliases in FIELD_ALIASES.items():
        value = _pick(student, aliases)
        if value is not None:
            fields[field_name] = value

    if "subject_id" not in fields:
        raise RecordParseError("Incident student has no id")

    fields.setdefault("total_events", 1)
    fields.setdefault("recent_events", 1)
    occurred = entry.get("dateOccurred")
    if occurred is not None:
        fields["last_event_date"] = str(occurred)

    try:
        return SubjectRecord(**fields)
    except ValidationError as e:
        raise RecordParseError(f"Invalid incident for subject {fields.get('subject_id')!r}: {e}") from e


def parse_entries(
    entries: List[Any],
    shape: PayloadShape,
    provider_name: str = "provider",
) -> Tuple[List[SubjectRecord], int]:
    """
    Parse every entry of a list payload, skipping malformed ones.

    Returns:
        Tuple of (records in response order, number of skipped entries)
    """
    parser = parse_incident if shape is PayloadShape.INCIDENT_LIST else parse_subject

    records: List[SubjectRecord] = []
    skipped = 0
    for index, entry in enumerate(entries):
        try:
            records.append(parser(entry))
        except RecordParseError as e:
            skipped += 1
            logger.warning(
                f"Skipping malformed entry {index} from {provider_name}: {e}",
                extra={"provider": provider_name, "entry_index": index}
            )

    return records, skipped


def parse_single(data: Dict[str, Any], subject_id: Optional[int] = None) -> Optional[SubjectRecord]:
    """
    Parse a detail payload, returning None when it is not a usable record.

    A profile that omits its own id is attributed to ``subject_id``, the
    subject that was asked for.
    """
    if subject_id is not None and _pick(data, FIELD_ALIASES["subject_id"]) is None:
        data = {**data, FIELD_ALIASES["subject_id"][0]: subject_id}
    try:
        return parse_subject(data)
    except RecordParseError as e:
        logger.warning(f"Detail payload is not a usable record: {e}")
        return None

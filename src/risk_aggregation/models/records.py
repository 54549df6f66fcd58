"""
Subject record schema shared by every provider.

A SubjectRecord is the unit of aggregation: one student as described by one
provider. Only ``subject_id`` is authoritative; every other field is
best-effort and falls back to a sentinel when the source omits it.
"""

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


UNKNOWN_NAME = "Unknown Student"
UNKNOWN_LABEL = "Unknown"
DEFAULT_SCORE = 100


class RiskLevel(str, Enum):
    """Behavioral risk tiers. NONE means unclassified, not risk-free."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NONE = "NONE"

    @classmethod
    def parse(cls, value: Any) -> "RiskLevel":
        """Map a source value onto a tier, treating anything unknown as NONE."""
        if isinstance(value, RiskLevel):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return cls.NONE
        return cls.NONE


class RiskCategory(str, Enum):
    """Tabs a caller can filter by."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"  # low or unclassified
    ALL = "all"

    @classmethod
    def parse(cls, value: Any) -> "RiskCategory":
        """
        Accept enum members, plain names and tab ids such as ``high-risk``.

        None or a blank string selects every subject.

        Raises:
            ValueError: if the value names no known tab
        """
        if isinstance(value, RiskCategory):
            return value
        if value is None:
            return cls.ALL
        name = str(value).strip().lower()
        if not name:
            return cls.ALL
        if name.endswith("-risk"):
            name = name[: -len("-risk")]
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown risk category: {value!r}") from None

    def accepts(self, level: RiskLevel) -> bool:
        """Check whether a classified level belongs to this category."""
        if self is RiskCategory.ALL:
            return True
        if self is RiskCategory.LOW:
            return level in (RiskLevel.LOW, RiskLevel.NONE)
        return level.value.lower() == self.value


class SubjectRecord(BaseModel):
    """One subject (student) as reported by a single provider."""

    model_config = ConfigDict(frozen=True)

    subject_id: int
    display_name: str = UNKNOWN_NAME
    identifier_code: str = ""  # matricule
    group_label: str = UNKNOWN_LABEL  # class name
    subgroup_label: str = UNKNOWN_LABEL  # sub-class name
    risk_level: RiskLevel = RiskLevel.NONE
    score: int = Field(default=DEFAULT_SCORE, ge=0, le=100)
    total_events: int = Field(default=0, ge=0)
    recent_events: int = Field(default=0, ge=0)
    intervention_count: int = Field(default=0, ge=0)
    last_event_date: Optional[str] = None

    @field_validator("subject_id", mode="before")
    @classmethod
    def validate_subject_id(cls, v):
        """Reject booleans and non-integral ids; accept numeric strings."""
        if isinstance(v, bool) or v is None:
            raise ValueError("subject_id must be an integer")
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("subject_id must be an integer")
            return int(v)
        if isinstance(v, str):
            return int(v.strip())
        return v

    @field_validator("risk_level", mode="before")
    @classmethod
    def validate_risk_level(cls, v):
        return RiskLevel.parse(v)

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        """Clamp scores into 0-100; a missing or unreadable score means best behavior."""
        number = _to_int(v)
        if number is None:
            return DEFAULT_SCORE
        return max(0, min(100, number))

    @field_validator("total_events", "recent_events", "intervention_count", mode="before")
    @classmethod
    def clamp_counter(cls, v):
        number = _to_int(v)
        if number is None:
            return 0
        return max(0, number)

    @field_validator("last_event_date", mode="before")
    @classmethod
    def validate_last_event_date(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("identifier_code", mode="before")
    @classmethod
    def validate_identifier_code(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("display_name", "group_label", "subgroup_label", mode="before")
    @classmethod
    def default_labels(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN_NAME if info.field_name == "display_name" else UNKNOWN_LABEL
        return str(v)

    @model_validator(mode="after")
    def default_identifier_code(self):
        # frozen model: bypass __setattr__ for the derived default
        if not self.identifier_code:
            object.__setattr__(self, "identifier_code", f"STU{self.subject_id}")
        return self

    @property
    def is_classified(self) -> bool:
        return self.risk_level is not RiskLevel.NONE


def _to_int(value: Any) -> Optional[int]:
    """Coerce a numeric source value to int, or None when it is absent or unreadable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(round(value))
    return None

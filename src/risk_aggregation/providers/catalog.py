"""
Provider endpoint catalog.

A catalog lists, in priority order, the collection providers an aggregation
cycle fans out to, the optional raw incident-log salvage provider, and the
ordered mirror endpoints used for single-subject detail lookups. Catalogs can
be loaded from YAML or taken from the built-in discipline office defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .envelope import PayloadShape


logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when a provider catalog cannot be loaded."""
    pass


class ProviderSpec(BaseModel):
    """One remote endpoint and how to read its payload."""
    name: str
    path: str  # relative to the base URL, or an absolute URL
    method: str = "GET"
    timeout: Optional[float] = Field(default=None, gt=0, le=120)
    shape: PayloadShape = PayloadShape.SUBJECT_LIST
    data_key: Optional[str] = None
    params: Dict[str, str] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def validate_method(cls, v):
        method = v.upper()
        if method not in ("GET", "POST"):
            raise ValueError("method must be GET or POST")
        return method

    def url(self, base_url: str) -> str:
        """Resolve the endpoint against a base URL."""
        if self.path.startswith(("http://", "https://")):
            return self.path
        return f"{base_url.rstrip('/')}/{self.path.lstrip('/')}"


class ProviderCatalog(BaseModel):
    """Ordered provider endpoints for one view."""
    providers: List[ProviderSpec] = Field(default_factory=list)
    salvage: Optional[ProviderSpec] = None
    detail_endpoints: List[str] = Field(default_factory=list)


def default_catalog() -> ProviderCatalog:
    """Discipline office endpoints, most authoritative first."""
    return ProviderCatalog(
        providers=[
            ProviderSpec(
                name="dashboard",
                path="discipline-master/dashboard",
                shape=PayloadShape.SUBJECT_LIST,
                data_key="urgentInterventions",
            ),
            ProviderSpec(
                name="early-warning",
                path="discipline-master/early-warning",
                shape=PayloadShape.SUBJECT_LIST,
                data_key="atRiskStudents",
            ),
            ProviderSpec(
                name="risk-assessment",
                path="discipline-master/risk-assessment",
                shape=PayloadShape.SUBJECT_LIST_OR_OBJECT,
            ),
        ],
        salvage=ProviderSpec(
            name="discipline-incidents",
            path="discipline",
            shape=PayloadShape.INCIDENT_LIST,
        ),
        detail_endpoints=[
            "discipline-master/student-profile/{subject_id}",
        ],
    )


def load_catalog(path: Union[str, Path]) -> ProviderCatalog:
    """
    Load a provider catalog from a YAML file.

    Expected layout::

        providers:
          - name: dashboard
            path: discipline-master/dashboard
            data_key: urgentInterventions
        salvage:
          name: discipline-incidents
          path: discipline
          shape: incident_list
        detail_endpoints:
          - discipline-master/student-profile/{subject_id}

    Raises:
        CatalogError: if the file is missing, not YAML, or fails validation
    """
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise CatalogError(f"Catalog file not found: {catalog_path}")

    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Catalog {catalog_path} is not valid YAML: {e}") from e

    return catalog_from_dict(raw or {}, source=str(catalog_path))


def catalog_from_dict(raw: Dict[str, Any], source: str = "<dict>") -> ProviderCatalog:
    """Validate a catalog mapping."""
    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog {source} must be a mapping")

    try:
        catalog = ProviderCatalog.model_validate(raw)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {source}: {e}") from e

    for template in catalog.detail_endpoints:
        if "{subject_id}" not in template:
            raise CatalogError(f"Detail endpoint '{template}' has no {{subject_id}} placeholder")

    logger.info(
        f"Loaded provider catalog from {source}",
        extra={
            "providers": [p.name for p in catalog.providers],
            "salvage": catalog.salvage.name if catalog.salvage else None,
            "detail_endpoints": len(catalog.detail_endpoints),
        }
    )
    return catalog

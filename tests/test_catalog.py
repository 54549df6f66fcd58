"""Tests for provider catalog loading."""

from pathlib import Path

import pytest

from risk_aggregation.providers import (
    CatalogError,
    PayloadShape,
    ProviderSpec,
    catalog_from_dict,
    default_catalog,
    load_catalog,
)


CATALOG_YAML = """
providers:
  - name: dashboard
    path: discipline-master/dashboard
    data_key: urgentInterventions
  - name: risk-assessment
    path: discipline-master/risk-assessment
    shape: subject_list_or_object
    timeout: 5
salvage:
  name: discipline-incidents
  path: discipline
  shape: incident_list
detail_endpoints:
  - discipline-master/student-profile/{subject_id}
  - students/{subject_id}
"""


class TestDefaultCatalog:
    """Built-in endpoints."""

    def test_priority_order(self):
        """Test built-in provider order."""
        catalog = default_catalog()
        assert [p.name for p in catalog.providers] == ["dashboard", "early-warning", "risk-assessment"]

    def test_salvage_reads_incidents(self):
        """Test built-in salvage provider shape."""
        assert default_catalog().salvage.shape is PayloadShape.INCIDENT_LIST

    def test_detail_endpoints_have_placeholder(self):
        """Test built-in detail endpoint templates."""
        assert all("{subject_id}" in t for t in default_catalog().detail_endpoints)


class TestLoadCatalog:
    """YAML catalogs."""

    def test_load_yaml(self, tmp_path):
        """Test loading a catalog from YAML."""
        path = tmp_path / "providers.yaml"
        path.write_text(CATALOG_YAML)

        catalog = load_catalog(path)

        assert [p.name for p in catalog.providers] == ["dashboard", "risk-assessment"]
        assert catalog.providers[0].data_key == "urgentInterventions"
        assert catalog.providers[1].shape is PayloadShape.SUBJECT_LIST_OR_OBJECT
        assert catalog.providers[1].timeout == 5
        assert catalog.salvage.name == "discipline-incidents"
        assert len(catalog.detail_endpoints) == 2

    def test_missing_file(self, tmp_path):
        """Test missing catalog file."""
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML."""
        path = tmp_path / "broken.yaml"
        path.write_text("providers: [unclosed")
        with pytest.raises(CatalogError, match="not valid YAML"):
            load_catalog(path)

    def test_empty_file_is_empty_catalog(self, tmp_path):
        """Test an empty catalog file."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        catalog = load_catalog(path)
        assert catalog.providers == []
        assert catalog.salvage is None


class TestCatalogValidation:
    """Invalid catalogs are rejected."""

    def test_not_a_mapping(self):
        """Test a catalog that is not a mapping."""
        with pytest.raises(CatalogError, match="mapping"):
            catalog_from_dict(["dashboard"])

    def test_unknown_shape(self):
        """Test an unknown payload shape."""
        with pytest.raises(CatalogError):
            catalog_from_dict({"providers": [{"name": "x", "path": "x", "shape": "table"}]})

    def test_bad_method(self):
        """Test an unsupported HTTP method."""
        with pytest.raises(CatalogError):
            catalog_from_dict({"providers": [{"name": "x", "path": "x", "method": "DELETE"}]})

    def test_detail_endpoint_without_placeholder(self):
        """Test a detail endpoint with no subject placeholder."""
        with pytest.raises(CatalogError, match="placeholder"):
            catalog_from_dict({"detail_endpoints": ["students/profile"]})


class TestProviderSpec:
    """URL resolution and normalization."""

    def test_relative_path(self):
        """Test resolving a relative path."""
        spec = ProviderSpec(name="x", path="/discipline")
        assert spec.url("https://host/api/v1/") == "https://host/api/v1/discipline"

    def test_absolute_path(self):
        """Test an absolute endpoint URL."""
        spec = ProviderSpec(name="x", path="https://other/api/students")
        assert spec.url("https://host/api/v1") == "https://other/api/students"

    def test_method_is_uppercased(self):
        """Test method normalization."""
        assert ProviderSpec(name="x", path="x", method="post").method == "POST"


def test_example_catalog_matches_defaults():
    """The shipped example catalog describes the built-in endpoints."""
    example = load_catalog(Path(__file__).parent.parent / "configs" / "providers.example.yaml")
    defaults = default_catalog()

    assert [p.name for p in example.providers] == [p.name for p in defaults.providers]
    assert [p.data_key for p in example.providers] == [p.data_key for p in defaults.providers]
    assert example.salvage.path == defaults.salvage.path
    assert example.detail_endpoints == defaults.detail_endpoints

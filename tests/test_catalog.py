"""
Occupational Catalog Tests.

Tests for:
- Role metrics built from flat task records
- Lookup by code and title
- Loading from disk, including the usage hierarchy format

Run with:
    pytest tests/test_catalog.py -v
"""

import dataclasses
import json

import pytest

from workforce_exposure.catalog import (
    DEFAULT_CATALOG_PATH,
    OccupationCatalog,
    catalog_share,
    get_default_catalog,
    load_catalog,
)
from workforce_exposure.exceptions import CatalogError


# ============================================================================
# Metrics Tests
# ============================================================================

class TestCatalogMetrics:
    """Tests for role metrics built from records."""

    def test_flat_record_metrics(self, catalog):
        """Usage counts and task buckets are summarised per role."""
        metrics = catalog.get_by_code("15-1252.00").metrics

        assert metrics.total_count == 150
        assert metrics.automation_count == pytest.approx(65)
        assert metrics.augmentation_count == pytest.approx(65)
        assert metrics.manual_count == pytest.approx(20)
        assert metrics.coverage == pytest.approx(0.8)
        assert (metrics.automation_tasks, metrics.augmentation_tasks, metrics.manual_tasks) == (1, 1, 1)
        assert metrics.task_count == 3

    def test_declared_task_count_kept(self, catalog):
        """A declared task count without task rows is preserved."""
        metrics = catalog.get_by_code("53-3032.00").metrics

        assert metrics.task_count == 9
        assert metrics.tasks == ()
        assert metrics.coverage is None

    @pytest.mark.parametrize("value,expected", [
        (0.4, 0.4),
        (1, 1.0),
        (40, 0.4),
        (250, 1.0),
        (5000, 1.0),
        (-3, 0.0),
        (None, 0.0),
        ("0.5", 0.0),
        (True, 0.0),
    ])
    def test_catalog_share(self, value, expected):
        """Shares pass through, percentages are scaled, junk is zero."""
        assert catalog_share(value) == pytest.approx(expected)

    def test_entities_are_frozen(self, catalog):
        """Catalog entries cannot be mutated."""
        role = catalog.get_by_code("15-1252.00")

        with pytest.raises(dataclasses.FrozenInstanceError):
            role.title = "Changed"


# ============================================================================
# Lookup Tests
# ============================================================================

class TestCatalogLookup:
    """Tests for catalog lookups."""

    def test_find_by_code_then_title(self, catalog):
        """Code wins; title is used when the code is unknown."""
        assert catalog.find(" 15-1252.00 ").code == "15-1252.00"
        assert catalog.find("unknown", "customer service REPRESENTATIVES").code == "43-4051.00"
        assert catalog.find("unknown", "unknown") is None
        assert catalog.find() is None

    def test_first_record_wins(self):
        """A repeated code keeps the first record."""
        catalog = OccupationCatalog.from_records([
            {"code": "1", "title": "First"},
            {"code": "1", "title": "Second"},
        ])

        assert len(catalog) == 2
        assert catalog.get_by_code("1").title == "First"
        assert catalog.get_by_title("second").title == "Second"

    def test_empty(self):
        catalog = OccupationCatalog.empty()

        assert len(catalog) == 0
        assert catalog.find_for_role(None) is None


# ============================================================================
# Loading Tests
# ============================================================================

class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_load_flat_file(self, catalog_file):
        catalog = load_catalog(catalog_file)

        assert len(catalog) == 3
        assert catalog.get_by_code("43-4051.00").metrics.automation_tasks == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_missing_roles_list(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"occupations": []}), encoding="utf-8")

        with pytest.raises(CatalogError, match="roles"):
            load_catalog(path)

    def test_invalid_record(self, tmp_path):
        """A record without a code fails the whole load."""
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({"roles": [{"title": "No code"}]}), encoding="utf-8")

        with pytest.raises(CatalogError, match="index 0"):
            load_catalog(path)

    def test_hierarchy_without_role_codes(self, tmp_path):
        path = tmp_path / "hierarchy.json"
        path.write_text(json.dumps({"onet_hierarchy": []}), encoding="utf-8")

        with pytest.raises(CatalogError, match="role_codes"):
            load_catalog(path)

    def test_usage_hierarchy(self, tmp_path):
        """Roles come from the hierarchy; unmapped titles are skipped."""

        def metric(value):
            return {"global": {"GLOBAL": value}}

        data = {
            "onet_hierarchy": [{
                "cluster_name": "Computer and Mathematical",
                "children": [
                    {
                        "cluster_name": "Software Developers",
                        "variable": {"pct": metric(2.0)},
                        "children": [
                            {"cluster_name": "Write code", "variable": {
                                "pct": metric(1.0), "count": metric(10),
                                "automation_pct": metric(60), "augmentation_pct": metric(30)}},
                            {"cluster_name": "Design systems", "variable": {
                                "pct": metric(0.5), "count": metric(5),
                                "automation_pct": metric(0.1), "augmentation_pct": metric(0.7)}},
                        ],
                    },
                    {
                        "cluster_name": "Quiet Role",
                        "variable": {"pct": metric(0)},
                        "children": [{"cluster_name": "Think"}],
                    },
                    {"cluster_name": "Unmapped Role", "variable": {"pct": metric(1.0)}},
                ],
            }],
            "role_codes": {
                "software developers": {"code": "15-1252.00", "title": "Software Developers"},
                "quiet role": {"code": "99-0001.00"},
            },
        }
        path = tmp_path / "hierarchy.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        catalog = load_catalog(path)

        assert len(catalog) == 2
        developers = catalog.get_by_title("software developers")
        assert developers.code == "15-1252.00"
        assert developers.parent_cluster == "Computer and Mathematical"
        metrics = developers.metrics
        assert [task.normalized_weight for task in metrics.tasks] == [0.5, 0.25]
        assert metrics.coverage == pytest.approx(0.75)
        assert metrics.tasks[0].automation_share == pytest.approx(0.6)
        assert metrics.total_count == 15
        assert metrics.automation_count == pytest.approx(6.5)
        assert (metrics.automation_tasks, metrics.augmentation_tasks) == (1, 1)

        quiet = catalog.get_by_code("99-0001.00")
        assert quiet.title == "Quiet Role"
        assert quiet.metrics.manual_tasks == 1
        assert quiet.metrics.coverage == 0.0

    def test_packaged_default(self):
        """The packaged catalog loads and is cached."""
        catalog = get_default_catalog()

        assert DEFAULT_CATALOG_PATH.exists()
        assert len(catalog) >= 8
        assert catalog.get_by_code("15-1252.00") is not None
        assert get_default_catalog() is catalog

    def test_configured_path(self, catalog_file, monkeypatch):
        """WORKFORCE_EXPOSURE_CATALOG_PATH overrides the packaged catalog."""
        monkeypatch.setenv("WORKFORCE_EXPOSURE_CATALOG_PATH", str(catalog_file))

        assert len(get_default_catalog()) == 3

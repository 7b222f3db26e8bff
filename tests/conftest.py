"""
Pytest configuration and shared fixtures for Workforce Exposure tests.

This file provides:
- A small fixture occupational catalog (in memory and on disk)
- Sample company reports in the camelCase wire shape
- Settings and cache isolation
"""

import json

import pytest

from workforce_exposure.catalog import OccupationCatalog, get_default_catalog
from workforce_exposure.config import Settings, get_settings
from workforce_exposure.models import OrgReport

# ============================================================================
# Catalog Fixtures
# ============================================================================

CATALOG_RECORDS = [
    {
        "code": "15-1252.00",
        "title": "Software Developers",
        "parentCluster": "Computer and Mathematical",
        "tasks": [
            # automation: 0.6 > 0.3
            {"name": "Write code", "weight": 0.5, "count": 100, "automationShare": 0.6, "augmentationShare": 0.3},
            # augmentation: 0.7 > 0.1
            {"name": "Design systems", "weight": 0.3, "count": 50, "automationShare": 0.1, "augmentationShare": 0.7},
            # manual: no usage
            {"name": "Meet stakeholders", "weight": 0.0, "count": 0, "automationShare": 0.0, "augmentationShare": 0.0},
        ],
    },
    {
        "code": "43-4051.00",
        "title": "Customer Service Representatives",
        "parentCluster": "Office and Administrative Support",
        "tasks": [
            {"name": "Answer inquiries", "weight": 0.6, "count": 80, "automationShare": 0.7, "augmentationShare": 0.2},
            # exact tie goes to automation
            {"name": "Log tickets", "weight": 0.2, "count": 20, "automationShare": 0.5, "augmentationShare": 0.5},
            {"name": "Walk-in support", "weight": 0.0, "count": 0, "automationShare": 0.0, "augmentationShare": 0.0},
        ],
    },
    {
        "code": "53-3032.00",
        "title": "Heavy and Tractor-Trailer Truck Drivers",
        "parentCluster": "Transportation and Material Moving",
        "taskCount": 9,
        "tasks": [],
    },
]


@pytest.fixture
def catalog_records():
    """Flat catalog records."""
    return [dict(record) for record in CATALOG_RECORDS]


@pytest.fixture
def catalog():
    """In-memory fixture catalog."""
    return OccupationCatalog.from_records(CATALOG_RECORDS)


@pytest.fixture
def catalog_file(tmp_path):
    """Fixture catalog written to disk."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"roles": CATALOG_RECORDS}), encoding="utf-8")
    return path


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def clear_caches():
    """Reset cached settings and default catalog around each test."""
    get_settings.cache_clear()
    get_default_catalog.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_catalog.cache_clear()


# ============================================================================
# Report Fixtures
# ============================================================================

@pytest.fixture
def sample_report_data():
    """
    Report for a 1000-person company.

    Engineering holds 400 software developers, support holds 300 customer
    service representatives and 50 people in an occupation the report does
    not describe.
    """
    return {
        "metadata": {
            "companyName": "Acme Corp",
            "companySlug": "acme",
            "hqCountry": "USA",
            "industry": "Software",
            "workforceEstimate": 1000,
        },
        "hierarchy": [
            {"id": "org", "name": "Acme", "level": 0, "headcount": 1000},
            {
                "id": "eng",
                "name": "Engineering",
                "level": 1,
                "parentId": "org",
                "headcount": 600,
                "automationShare": 0.4,
                "augmentationShare": 0.3,
                "dominantRoles": [{"roleId": "15-1252.00", "headcount": 400}],
            },
            {
                "id": "support",
                "name": "Support",
                "level": 1,
                "parentId": "org",
                "headcount": 400,
                "automationShare": 0.5,
                "augmentationShare": 0.2,
                "dominantRoles": [
                    {"roleId": "43-4051.00", "headcount": 300},
                    {"roleId": "99-9999.00", "headcount": 50},
                ],
            },
        ],
        "roles": [
            {"code": "15-1252.00", "title": "Software Developers"},
            {"onetCode": "43-4051.00", "title": "Customer Service Representatives"},
        ],
        "aggregations": [
            {
                "type": "geography",
                "label": "Region",
                "buckets": [
                    {"key": "EMEA", "headcount": 400, "automationShare": 0.3, "augmentationShare": 0.2},
                    {"key": "APAC", "headcount": 0, "automationShare": 0.3},
                    {"key": "Americas", "headcount": 600},
                ],
            }
        ],
    }


@pytest.fixture
def sample_report(sample_report_data):
    """Validated sample report."""
    return OrgReport.model_validate(sample_report_data)

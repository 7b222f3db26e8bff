"""Occupational catalog: read-only reference data keyed by code and title."""

from workforce_exposure.catalog.catalog import (
    DEFAULT_CATALOG_PATH,
    CatalogRole,
    CatalogRoleMetrics,
    CatalogTask,
    OccupationCatalog,
    catalog_share,
    get_default_catalog,
    load_catalog,
    normalize_key,
    summarize_tasks,
)

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "CatalogRole",
    "CatalogRoleMetrics",
    "CatalogTask",
    "OccupationCatalog",
    "catalog_share",
    "get_default_catalog",
    "load_catalog",
    "normalize_key",
    "summarize_tasks",
]

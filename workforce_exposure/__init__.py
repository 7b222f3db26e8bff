"""
Workforce Exposure - AI exposure analytics for company workforces

This package estimates how much of a company's workforce is exposed to AI
automation and augmentation, then rolls many companies' estimates into
cross-company statistics:

- Org graph rollup of headcount and exposure shares
- Role task-mix resolution against an occupational catalog
- Company-level workforce impact snapshots
- Country, industry and task comparisons across companies

Architecture:
    - models/: Report, impact and analytics models (Pydantic)
    - catalog/: Occupational catalog reference data
    - graph/: Org graph builder
    - impact/: Workforce impact calculator and benchmarks
    - analytics/: Comparative aggregator
    - constants/: Task-mix buckets, country and industry aliases
    - config/: Configuration management
    - jobs/: Batch entry points

Usage:
    from workforce_exposure import build_comparative_analytics, compute_workforce_impact

    snapshot = compute_workforce_impact(report, catalog)
    payload = build_comparative_analytics(runs, catalog=catalog)
"""

__version__ = "0.1.0"

from workforce_exposure.analytics import build_comparative_analytics
from workforce_exposure.catalog import OccupationCatalog, get_default_catalog, load_catalog
from workforce_exposure.graph import build_org_graph
from workforce_exposure.impact import (
    collect_aggregation_impacts,
    collect_role_impacts,
    compute_workforce_impact,
    evaluate_workforce_impact,
)
from workforce_exposure.task_mix import derive_task_mix_counts, derive_task_mix_shares

__all__ = [
    # Catalog
    "OccupationCatalog",
    "get_default_catalog",
    "load_catalog",
    # Graph
    "build_org_graph",
    # Task mix
    "derive_task_mix_counts",
    "derive_task_mix_shares",
    # Impact
    "collect_aggregation_impacts",
    "collect_role_impacts",
    "compute_workforce_impact",
    "evaluate_workforce_impact",
    # Analytics
    "build_comparative_analytics",
]

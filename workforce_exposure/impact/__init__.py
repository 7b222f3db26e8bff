"""Workforce impact: company snapshots, role and bucket lenses, benchmarks."""

from workforce_exposure.impact.benchmark import attach_percentiles, to_percentile
from workforce_exposure.impact.workforce_impact import (
    build_role_headcount_map,
    collect_aggregation_impacts,
    collect_role_impacts,
    compute_workforce_impact,
    evaluate_workforce_impact,
    parse_workforce_metric,
    resolve_workforce_metric,
)

__all__ = [
    "attach_percentiles",
    "build_role_headcount_map",
    "collect_aggregation_impacts",
    "collect_role_impacts",
    "compute_workforce_impact",
    "evaluate_workforce_impact",
    "parse_workforce_metric",
    "resolve_workforce_metric",
    "to_percentile",
]

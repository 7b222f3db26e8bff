"""Workforce Exposure data models."""

from workforce_exposure.models.report import (
    Aggregation,
    AggregationBucket,
    AggregationType,
    DominantRole,
    OrgNode,
    OrgReport,
    OrgRole,
    ReportMetadata,
    TaskMixCounts,
    TaskMixShares,
    TopTask,
)
from workforce_exposure.models.issues import IssueKind, ResolutionIssue
from workforce_exposure.models.impact import (
    AggregationImpact,
    ImpactComponents,
    ImpactPercentiles,
    RoleImpact,
    RoleNodeContribution,
    WorkforceImpactResult,
    WorkforceImpactSnapshot,
)
from workforce_exposure.models.analytics import (
    ComparativeAnalyticsPayload,
    ComparativeRun,
    CompanyContribution,
    CountryMetric,
    Coverage,
    DistributionEntry,
    Distributions,
    HeatmapCell,
    IndustryMetric,
    TopTaskMetric,
)

__all__ = [
    # Report
    "Aggregation",
    "AggregationBucket",
    "AggregationType",
    "DominantRole",
    "OrgNode",
    "OrgReport",
    "OrgRole",
    "ReportMetadata",
    "TaskMixCounts",
    "TaskMixShares",
    "TopTask",
    # Issues
    "IssueKind",
    "ResolutionIssue",
    # Impact
    "AggregationImpact",
    "ImpactComponents",
    "ImpactPercentiles",
    "RoleImpact",
    "RoleNodeContribution",
    "WorkforceImpactResult",
    "WorkforceImpactSnapshot",
    # Analytics
    "ComparativeAnalyticsPayload",
    "ComparativeRun",
    "CompanyContribution",
    "CountryMetric",
    "Coverage",
    "DistributionEntry",
    "Distributions",
    "HeatmapCell",
    "IndustryMetric",
    "TopTaskMetric",
]

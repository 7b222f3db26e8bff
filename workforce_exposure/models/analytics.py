"""
Input and output models for the Comparative Aggregator.

A ComparativeRun is one company's finished run: its stored impact snapshot
(possibly missing) and its raw report (possibly missing). The payload is
regenerated from the full list of runs on every batch execution.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import Field, ValidationError, ValidatorFunctionWrapHandler, field_validator

from workforce_exposure.models.base import CamelModel
from workforce_exposure.models.impact import WorkforceImpactSnapshot
from workforce_exposure.models.issues import ResolutionIssue
from workforce_exposure.models.report import OrgReport

logger = logging.getLogger(__name__)


class ComparativeRun(CamelModel):
    """
    One company run fed into the aggregator.

    Attributes:
        company_id: Company identifier
        run_id: Run identifier (defaults to a positional key when absent)
        company_slug: URL slug, used as a display fallback
        display_name: Company display name
        hq_country: Free-text headquarters country
        industry: Free-text industry label
        workforce_metric: Stored impact snapshot, if any
        report: Raw report, used for task ranking
    """
    company_id: str
    run_id: Optional[str] = None
    company_slug: Optional[str] = None
    display_name: Optional[str] = None
    hq_country: Optional[str] = None
    industry: Optional[str] = None
    workforce_metric: Optional[WorkforceImpactSnapshot] = None
    report: Optional[OrgReport] = None

    @field_validator("workforce_metric", mode="wrap")
    @classmethod
    def _malformed_metric_is_absent(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError as e:
            logger.debug(f"Ignoring malformed stored metric: {e.error_count()} error(s)")
            return None


class CountryMetric(CamelModel):
    country: str
    iso_code: Optional[str] = None
    run_count: int
    average_score: Optional[float] = None
    average_automation: Optional[float] = None
    average_augmentation: Optional[float] = None
    average_headcount: Optional[float] = None


class IndustryMetric(CamelModel):
    industry: str
    run_count: int
    average_score: Optional[float] = None
    average_automation: Optional[float] = None
    average_augmentation: Optional[float] = None
    average_headcount: Optional[float] = None


class HeatmapCell(CamelModel):
    country: str
    iso_code: Optional[str] = None
    industry: str
    run_count: int
    average_score: Optional[float] = None
    high_risk_share: Optional[float] = None


class DistributionEntry(CamelModel):
    """Five-number summary of a group's unweighted scores."""
    key: str
    label: str
    run_count: int
    iso_code: Optional[str] = None
    min: Optional[float] = None
    q1: Optional[float] = None
    median: Optional[float] = None
    q3: Optional[float] = None
    max: Optional[float] = None


class CompanyContribution(CamelModel):
    name: str
    exposure: float
    share: float


class TopTaskMetric(CamelModel):
    task: str
    automation_exposure: float
    augmentation_exposure: float
    total_exposure: float
    automation_share: float
    augmentation_share: float
    run_count: int
    sample_roles: List[str] = Field(default_factory=list)
    top_companies: List[CompanyContribution] = Field(default_factory=list)


class Coverage(CamelModel):
    companies: int = 0
    runs: int = 0
    total_headcount: float = 0.0
    average_exposure: float = 0.0


class Distributions(CamelModel):
    by_country: List[DistributionEntry] = Field(default_factory=list)
    by_industry: List[DistributionEntry] = Field(default_factory=list)


class ComparativeAnalyticsPayload(CamelModel):
    """Cross-company statistics regenerated on every batch run."""
    generated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    coverage: Coverage = Field(default_factory=Coverage)
    countries: List[CountryMetric] = Field(default_factory=list)
    industries: List[IndustryMetric] = Field(default_factory=list)
    heatmap: List[HeatmapCell] = Field(default_factory=list)
    distributions: Distributions = Field(default_factory=Distributions)
    top_tasks: List[TopTaskMetric] = Field(default_factory=list)
    issues: List[ResolutionIssue] = Field(default_factory=list)

"""
Output models for the Workforce Impact Calculator.

WorkforceImpactSnapshot is the per-company record persisted by the external
metrics store and later fed back into the comparative aggregator. It uses
plain floats throughout; ``None`` for the snapshot as a whole means "no
usable signal", which is never the same thing as a score of zero.
"""

from typing import Any, List, Optional

from pydantic import Field, model_validator

from workforce_exposure.models.base import CamelModel
from workforce_exposure.models.issues import ResolutionIssue
from workforce_exposure.models.report import AggregationType


class ImpactComponents(CamelModel):
    """Legacy nested representation of the snapshot components."""
    automation: Optional[float] = None
    augmentation: Optional[float] = None
    coverage: Optional[float] = None


class ImpactPercentiles(CamelModel):
    """Rank of a snapshot among all benchmarked snapshots, in [0, 1]."""
    overall: float = 0.0
    automation: float = 0.0
    augmentation: float = 0.0


class WorkforceImpactSnapshot(CamelModel):
    """
    Company-level exposure estimate.

    Attributes:
        score: 10 x (automation_component + augmentation_component)
        total_headcount: Denominator used for the components
        automation_impact: Headcount-weighted automation exposure
        augmentation_impact: Headcount-weighted augmentation exposure
        coverage_headcount: Headcount backed by a resolved role
        automation_component: automation_impact / total_headcount
        augmentation_component: augmentation_impact / total_headcount
        coverage_component: coverage_headcount / total_headcount
        percentiles: Benchmark ranks, when computed
        computed_at: ISO timestamp of the benchmark run
    """
    score: float
    total_headcount: float
    automation_impact: float = 0.0
    augmentation_impact: float = 0.0
    coverage_headcount: float = 0.0
    automation_component: float = 0.0
    augmentation_component: float = 0.0
    coverage_component: float = 0.0
    percentiles: Optional[ImpactPercentiles] = None
    computed_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_components(cls, data: Any) -> Any:
        """Older stored metrics nest the components under ``components``."""
        if not isinstance(data, dict) or not isinstance(data.get("components"), dict):
            return data
        data = dict(data)
        components = data.pop("components")
        for name in ("automation", "augmentation", "coverage"):
            value = components.get(name)
            camel, snake = f"{name}Component", f"{name}_component"
            if value is not None and data.get(camel) is None and data.get(snake) is None:
                data[camel] = value
        return data

    @property
    def components(self) -> ImpactComponents:
        return ImpactComponents(
            automation=self.automation_component,
            augmentation=self.augmentation_component,
            coverage=self.coverage_component,
        )


class WorkforceImpactResult(CamelModel):
    """Snapshot plus everything that was skipped while computing it."""
    snapshot: Optional[WorkforceImpactSnapshot] = None
    issues: List[ResolutionIssue] = Field(default_factory=list)

    @property
    def has_signal(self) -> bool:
        return self.snapshot is not None


class RoleNodeContribution(CamelModel):
    """One node's contribution to a role's node-share impact."""
    node_id: str
    node_name: str
    headcount: int
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None


class RoleImpact(CamelModel):
    """
    Per-role exposure derived from node-level shares.

    This is the org-estimate lens; it is deliberately independent from the
    task-catalog lens used for the company score.
    """
    code: str
    title: str
    headcount: int
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None
    manual_share: Optional[float] = None
    impact: Optional[float] = None
    nodes: List[RoleNodeContribution] = Field(default_factory=list)


class AggregationImpact(CamelModel):
    """Exposure of one producer-supplied aggregation bucket."""
    type: AggregationType
    group_label: str
    label: str
    headcount: float
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None
    manual_share: Optional[float] = None
    impact: Optional[float] = None
    notes: Optional[str] = None

"""
Workforce Impact Calculator.

Three independent lenses over one report:

1. ``evaluate_workforce_impact``: company score from catalog/task-mix shares,
   weighted by dominant-role headcount across the hierarchy.
2. ``collect_role_impacts``: per-role exposure from the node-level shares
   estimated in the report. It can disagree with (1) and is never merged
   into it.
3. ``collect_aggregation_impacts``: exposure of producer-supplied buckets,
   no role resolution needed.

A company without any resolvable role has no snapshot (None), never a
score of zero.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from workforce_exposure.catalog import OccupationCatalog
from workforce_exposure.config.settings import Settings, get_settings
from workforce_exposure.graph.org_graph import build_role_lookup
from workforce_exposure.models import (
    AggregationImpact,
    IssueKind,
    OrgReport,
    ResolutionIssue,
    RoleImpact,
    RoleNodeContribution,
    WorkforceImpactResult,
    WorkforceImpactSnapshot,
)
from workforce_exposure.task_mix import derive_task_mix_counts

logger = logging.getLogger(__name__)


@dataclass
class _ImpactAccumulator:
    total_headcount: float = 0.0
    automation_impact: float = 0.0
    augmentation_impact: float = 0.0
    known_headcount: float = 0.0


@dataclass
class _RoleAccumulator:
    code: str
    title: str
    headcount: int = 0
    automation_impact: float = 0.0
    augmentation_impact: float = 0.0
    nodes: List[RoleNodeContribution] = field(default_factory=list)


def _clamp_share(value: Optional[float]) -> Optional[float]:
    if value is None or value != value or value in (float("inf"), float("-inf")):
        return None
    return min(1.0, max(0.0, value))


# =============================================================================
# Company score
# =============================================================================

def build_role_headcount_map(report: OrgReport) -> Dict[str, int]:
    """
    Sum dominant-role headcount per role key across all nodes.

    Keys are trimmed, lowercased references in first-seen order. Entries
    without a headcount contribute 0. A repeated node id is ignored after
    its first occurrence, as in the org graph.
    """
    headcounts: Dict[str, int] = OrderedDict()
    seen_nodes = set()
    for node in report.hierarchy:
        if node.id in seen_nodes:
            continue
        seen_nodes.add(node.id)
        for entry in node.dominant_roles:
            key = entry.key
            if not key:
                continue
            headcounts[key] = headcounts.get(key, 0) + (entry.headcount or 0)
    return headcounts


def evaluate_workforce_impact(
    report: OrgReport,
    catalog: Optional[OccupationCatalog] = None,
    settings: Optional[Settings] = None,
) -> WorkforceImpactResult:
    """
    Compute the company-level exposure snapshot and the roles it skipped.

    Args:
        report: Company report
        catalog: Occupational catalog used for roles without stored counts
        settings: Score scale and segment total (cached settings when None)

    Returns:
        WorkforceImpactResult; ``snapshot`` is None when no headcount is
        backed by a resolved role with a task mix
    """
    settings = settings or get_settings()
    issues: List[ResolutionIssue] = []

    headcounts = build_role_headcount_map(report)
    if not headcounts:
        logger.debug("No dominant-role headcount in report, no impact signal")
        return WorkforceImpactResult(snapshot=None, issues=issues)

    lookup = build_role_lookup(report.roles)
    totals = _ImpactAccumulator()

    for role_key, headcount in headcounts.items():
        if headcount <= 0:
            continue
        totals.total_headcount += headcount

        role = lookup.get(role_key)
        if role is None:
            logger.warning(f"Role '{role_key}' referenced by the hierarchy was not found, skipping")
            issues.append(ResolutionIssue(
                kind=IssueKind.UNRESOLVED_ROLE,
                reference=role_key,
                context="workforce_impact",
                reason="role reference not found in report roles",
            ))
            continue

        counts = derive_task_mix_counts(role, catalog, settings.usage_segment_total)
        if counts.total <= 0:
            logger.debug(f"Role '{role_key}' has no task counts, skipping")
            issues.append(ResolutionIssue(
                kind=IssueKind.ROLE_WITHOUT_TASKS,
                reference=role.code,
                context="workforce_impact",
                reason="no task-mix counts from report or catalog",
            ))
            continue

        automation_share = counts.automation / counts.total
        augmentation_share = counts.augmentation / counts.total
        totals.automation_impact += headcount * automation_share
        totals.augmentation_impact += headcount * augmentation_share
        totals.known_headcount += headcount

        logger.debug(
            f"Role '{role_key}': headcount={headcount} "
            f"automation={automation_share:.3f} augmentation={augmentation_share:.3f}"
        )

    if totals.known_headcount == 0:
        return WorkforceImpactResult(snapshot=None, issues=issues)

    if totals.total_headcount > 0:
        denominator = totals.total_headcount
    elif report.metadata.workforce_estimate is not None:
        denominator = report.metadata.workforce_estimate
    else:
        denominator = totals.known_headcount
    denominator = denominator if denominator > 0 else 1

    automation_component = totals.automation_impact / denominator
    augmentation_component = totals.augmentation_impact / denominator
    coverage_component = totals.known_headcount / denominator
    score = settings.score_scale * (automation_component + augmentation_component)

    logger.debug(
        f"Workforce impact: score={score:.3f} denominator={denominator} "
        f"known={totals.known_headcount} coverage={coverage_component:.3f}"
    )

    snapshot = WorkforceImpactSnapshot(
        score=score,
        total_headcount=denominator,
        automation_impact=totals.automation_impact,
        augmentation_impact=totals.augmentation_impact,
        coverage_headcount=totals.known_headcount,
        automation_component=automation_component,
        augmentation_component=augmentation_component,
        coverage_component=coverage_component,
    )
    return WorkforceImpactResult(snapshot=snapshot, issues=issues)


def compute_workforce_impact(
    report: OrgReport,
    catalog: Optional[OccupationCatalog] = None,
    settings: Optional[Settings] = None,
) -> Optional[WorkforceImpactSnapshot]:
    """Snapshot only; see evaluate_workforce_impact."""
    return evaluate_workforce_impact(report, catalog, settings).snapshot


# =============================================================================
# Stored metrics
# =============================================================================

def parse_workforce_metric(data: Any, context: Optional[str] = None) -> Optional[WorkforceImpactSnapshot]:
    """
    Read a stored metric, or None when it is missing or malformed.

    Accepts the current flat shape, the legacy nested ``components`` shape
    and numeric strings.
    """
    if data is None:
        return None
    if isinstance(data, WorkforceImpactSnapshot):
        return data
    try:
        return WorkforceImpactSnapshot.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Stored workforce metric failed validation ({context or 'unknown'}): {e.errors()}")
        return None


def resolve_workforce_metric(
    stored: Any,
    report: Optional[OrgReport] = None,
    catalog: Optional[OccupationCatalog] = None,
    settings: Optional[Settings] = None,
    context: Optional[str] = None,
) -> Optional[WorkforceImpactSnapshot]:
    """Stored metric if valid, else recomputed from the report, else None."""
    snapshot = parse_workforce_metric(stored, context)
    if snapshot is not None:
        return snapshot
    if report is None:
        return None
    logger.debug(f"Recomputing workforce metric from report ({context or 'unknown'})")
    return compute_workforce_impact(report, catalog, settings)


# =============================================================================
# Node-share and bucket lenses
# =============================================================================

def collect_role_impacts(report: OrgReport) -> List[RoleImpact]:
    """
    Per-role exposure weighted by node-level shares.

    Only nodes that declare both shares contribute; each dominant role with
    positive headcount in such a node accumulates headcount x share.
    """
    lookup = build_role_lookup(report.roles)
    accumulators: Dict[str, _RoleAccumulator] = OrderedDict()
    seen_nodes = set()

    for node in report.hierarchy:
        if node.id in seen_nodes:
            continue
        seen_nodes.add(node.id)
        if not node.dominant_roles:
            continue
        if node.automation_share is None or node.augmentation_share is None:
            continue

        for entry in node.dominant_roles:
            headcount = entry.headcount or 0
            if not entry.key or headcount <= 0:
                continue

            record = accumulators.get(entry.key)
            if record is None:
                role = lookup.get(entry.key)
                if role is None:
                    logger.warning(f"Node {node.id}: role reference '{entry.role_id}' not found")
                    code, title = entry.role_id.strip(), entry.role_id.strip()
                else:
                    code, title = role.code, role.display_title
                record = accumulators[entry.key] = _RoleAccumulator(code=code, title=title)

            record.headcount += headcount
            record.automation_impact += headcount * node.automation_share
            record.augmentation_impact += headcount * node.augmentation_share
            record.nodes.append(RoleNodeContribution(
                node_id=node.id,
                node_name=node.name,
                headcount=headcount,
                automation_share=node.automation_share,
                augmentation_share=node.augmentation_share,
            ))

    results = []
    for record in accumulators.values():
        automation_share = record.automation_impact / record.headcount
        augmentation_share = record.augmentation_impact / record.headcount
        results.append(RoleImpact(
            code=record.code,
            title=record.title,
            headcount=record.headcount,
            automation_share=automation_share,
            augmentation_share=augmentation_share,
            manual_share=max(0.0, 1.0 - automation_share - augmentation_share),
            impact=record.headcount * (automation_share + augmentation_share),
            nodes=record.nodes,
        ))
    return results


def collect_aggregation_impacts(report: OrgReport) -> List[AggregationImpact]:
    """Exposure of each producer bucket with positive headcount."""
    impacts = []
    for aggregation in report.aggregations:
        for bucket in aggregation.buckets:
            headcount = bucket.headcount
            if headcount is None or headcount != headcount or headcount <= 0:
                continue

            automation_share = _clamp_share(bucket.automation_share)
            augmentation_share = _clamp_share(bucket.augmentation_share)
            has_share = automation_share is not None or augmentation_share is not None
            combined = (automation_share or 0.0) + (augmentation_share or 0.0)

            impacts.append(AggregationImpact(
                type=aggregation.type,
                group_label=aggregation.label,
                label=bucket.key,
                headcount=headcount,
                automation_share=automation_share,
                augmentation_share=augmentation_share,
                manual_share=max(0.0, 1.0 - combined) if has_share else None,
                impact=headcount * combined if has_share else None,
                notes=bucket.notes,
            ))
    return impacts

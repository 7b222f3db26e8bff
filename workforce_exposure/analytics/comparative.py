"""
Comparative Aggregator.

Rolls many companies' workforce impact snapshots into cross-company views:

- country and industry groups (headcount-weighted averages)
- a country x industry heatmap with the share of high-risk runs
- five-number score distributions per group
- a ranked table of the tasks carrying the most exposed headcount

The payload is rebuilt from scratch on every call; it is meant to run as a
periodic batch job over every finished run.

Usage:
    from workforce_exposure.analytics import build_comparative_analytics

    payload = build_comparative_analytics(runs, catalog=catalog)
    store(payload.model_dump(by_alias=True))
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from workforce_exposure.analytics.stats import average, is_finite_number, quantiles, weighted_average
from workforce_exposure.catalog import OccupationCatalog, get_default_catalog
from workforce_exposure.config.settings import Settings, get_settings
from workforce_exposure.constants.aggregation_groups import canonical_country, canonical_industry
from workforce_exposure.constants.countries import resolve_iso_code
from workforce_exposure.graph.org_graph import build_role_lookup
from workforce_exposure.impact.workforce_impact import build_role_headcount_map
from workforce_exposure.models import (
    ComparativeAnalyticsPayload,
    ComparativeRun,
    CompanyContribution,
    CountryMetric,
    Coverage,
    DistributionEntry,
    Distributions,
    HeatmapCell,
    IndustryMetric,
    IssueKind,
    OrgRole,
    ResolutionIssue,
    TopTaskMetric,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Accumulators
# =============================================================================

@dataclass
class _GroupAccumulator:
    key: str
    label: str
    iso_code: Optional[str] = None
    scores: List[float] = field(default_factory=list)
    automation: List[float] = field(default_factory=list)
    augmentation: List[float] = field(default_factory=list)
    headcounts: List[float] = field(default_factory=list)
    run_ids: set = field(default_factory=set)
    weighted_score_sum: float = 0.0
    weighted_automation_sum: float = 0.0
    weighted_augmentation_sum: float = 0.0
    weight_sum: float = 0.0

    def add(self, run_id: str, score, automation, augmentation, headcount) -> None:
        self.run_ids.add(run_id)
        if is_finite_number(score):
            self.scores.append(score)
        if is_finite_number(automation):
            self.automation.append(automation)
        if is_finite_number(augmentation):
            self.augmentation.append(augmentation)
        if not is_finite_number(headcount):
            return

        self.headcounts.append(headcount)
        if headcount <= 0:
            return
        self.weight_sum += headcount
        if is_finite_number(score):
            self.weighted_score_sum += score * headcount
        if is_finite_number(automation):
            self.weighted_automation_sum += automation * headcount
        if is_finite_number(augmentation):
            self.weighted_augmentation_sum += augmentation * headcount

    @property
    def average_score(self) -> Optional[float]:
        return weighted_average(self.weighted_score_sum, self.weight_sum, self.scores)

    @property
    def average_automation(self) -> Optional[float]:
        return weighted_average(self.weighted_automation_sum, self.weight_sum, self.automation)

    @property
    def average_augmentation(self) -> Optional[float]:
        return weighted_average(self.weighted_augmentation_sum, self.weight_sum, self.augmentation)

    def distribution(self) -> DistributionEntry:
        return DistributionEntry(
            key=self.key,
            label=self.label,
            run_count=len(self.run_ids),
            iso_code=self.iso_code,
            **quantiles(self.scores),
        )


@dataclass
class _HeatmapAccumulator:
    country: str
    industry: str
    iso_code: Optional[str] = None
    scores: List[float] = field(default_factory=list)
    high_risk: int = 0
    run_ids: set = field(default_factory=set)


@dataclass
class _TaskAccumulator:
    task: str
    automation_exposure: float = 0.0
    augmentation_exposure: float = 0.0
    run_ids: set = field(default_factory=set)
    roles: List[str] = field(default_factory=list)
    companies: Dict[str, CompanyContribution] = field(default_factory=OrderedDict)


def _ensure_group(groups: Dict[str, _GroupAccumulator], label: str,
                  iso_code: Optional[str] = None) -> _GroupAccumulator:
    key = label.lower()
    group = groups.get(key)
    if group is None:
        group = groups[key] = _GroupAccumulator(key=key, label=label, iso_code=iso_code)
    return group


def _group_sort_key(run_count: int, average_score: Optional[float], label: str):
    return (-run_count, -(average_score or 0.0), label.casefold())


def _normalise_share(value: Optional[float]) -> float:
    if not is_finite_number(value) or value <= 0:
        return 0.0
    return min(1.0, value)


def _role_exposure_shares(role: OrgRole):
    """Role automation/augmentation shares: own value if positive, else the stored task-mix share."""
    stored = role.task_mix_shares
    automation = _normalise_share(role.automation_share)
    if automation <= 0 and stored is not None:
        automation = _normalise_share(stored.automation)
    augmentation = _normalise_share(role.augmentation_share)
    if augmentation <= 0 and stored is not None:
        augmentation = _normalise_share(stored.augmentation)
    return automation, augmentation


# =============================================================================
# Top tasks
# =============================================================================

def _accumulate_tasks(
    run: ComparativeRun,
    run_id: str,
    catalog: OccupationCatalog,
    tasks: Dict[str, _TaskAccumulator],
    issues: List[ResolutionIssue],
    settings: Settings,
) -> None:
    """Spread each exposed role's headcount over its catalog tasks."""
    report = run.report
    headcounts = build_role_headcount_map(report)
    if not headcounts:
        return

    lookup = build_role_lookup(report.roles)
    role_headcounts: Dict[str, int] = OrderedDict()
    roles_by_code: Dict[str, OrgRole] = {}
    for key, headcount in headcounts.items():
        if headcount <= 0:
            continue
        role = lookup.get(key)
        if role is None:
            issues.append(ResolutionIssue(
                kind=IssueKind.UNRESOLVED_ROLE,
                reference=key,
                context=run.company_id,
                reason="role reference not found in report roles",
            ))
            continue
        role_headcounts[role.code] = role_headcounts.get(role.code, 0) + headcount
        roles_by_code.setdefault(role.code, role)

    company_label = (run.display_name or "").strip() or run.company_slug or run.company_id

    for code, role_headcount in role_headcounts.items():
        role = roles_by_code[code]
        automation_share, augmentation_share = _role_exposure_shares(role)
        if automation_share + augmentation_share <= 0:
            continue

        catalog_role = catalog.find_for_role(role)
        if catalog_role is None:
            logger.debug(f"{run.company_id}: role {role.code} not in catalog, no task breakdown")
            issues.append(ResolutionIssue(
                kind=IssueKind.UNCATALOGED_ROLE,
                reference=role.code,
                context=run.company_id,
                reason="no catalog entry for task ranking",
            ))
            continue

        positive_weight = sum(
            task.normalized_weight for task in catalog_role.metrics.tasks if task.normalized_weight > 0
        )
        if positive_weight <= 0:
            continue

        role_name = (role.title or "").strip() or catalog_role.title or role.code

        for task in catalog_role.metrics.tasks:
            if task.normalized_weight <= 0 or not task.key:
                continue
            base_exposure = role_headcount * (task.normalized_weight / positive_weight)
            automation_exposure = base_exposure * automation_share
            augmentation_exposure = base_exposure * augmentation_share
            total_exposure = automation_exposure + augmentation_exposure
            if not is_finite_number(total_exposure) or total_exposure <= 0:
                continue

            entry = tasks.get(task.key)
            if entry is None:
                entry = tasks[task.key] = _TaskAccumulator(task=task.name.strip())
            entry.automation_exposure += automation_exposure
            entry.augmentation_exposure += augmentation_exposure
            entry.run_ids.add(run_id)
            if role_name not in entry.roles and len(entry.roles) < settings.max_sample_roles_per_task:
                entry.roles.append(role_name)

            contribution = entry.companies.get(run.company_id)
            if contribution is None:
                entry.companies[run.company_id] = CompanyContribution(
                    name=company_label, exposure=total_exposure, share=0.0
                )
            else:
                contribution.exposure += total_exposure


def _rank_tasks(tasks: Dict[str, _TaskAccumulator], settings: Settings) -> List[TopTaskMetric]:
    ranked = []
    for entry in tasks.values():
        total = entry.automation_exposure + entry.augmentation_exposure
        if total <= settings.min_task_exposure:
            continue

        contributors = sorted(
            entry.companies.values(), key=lambda company: (-company.exposure, company.name.casefold())
        )[:settings.max_company_contributors]

        ranked.append(TopTaskMetric(
            task=entry.task,
            automation_exposure=entry.automation_exposure,
            augmentation_exposure=entry.augmentation_exposure,
            total_exposure=total,
            automation_share=entry.automation_exposure / total,
            augmentation_share=entry.augmentation_exposure / total,
            run_count=len(entry.run_ids),
            sample_roles=list(entry.roles),
            top_companies=[
                CompanyContribution(
                    name=company.name,
                    exposure=company.exposure,
                    share=company.exposure / total if company.exposure > 0 else 0.0,
                )
                for company in contributors
            ],
        ))

    ranked.sort(key=lambda metric: (-metric.total_exposure, -metric.run_count, metric.task.casefold()))
    return ranked[:settings.max_top_tasks]


# =============================================================================
# Payload
# =============================================================================

def _coverage(runs: Sequence[ComparativeRun]) -> Coverage:
    scores = []
    weighted_sum = 0.0
    weight = 0.0
    total_headcount = 0.0
    for run in runs:
        metric = run.workforce_metric
        if metric is None:
            continue
        if is_finite_number(metric.total_headcount):
            total_headcount += metric.total_headcount
        if not is_finite_number(metric.score):
            continue
        scores.append(metric.score)
        if is_finite_number(metric.total_headcount) and metric.total_headcount > 0:
            weighted_sum += metric.score * metric.total_headcount
            weight += metric.total_headcount

    return Coverage(
        companies=len({run.company_id for run in runs}),
        runs=len(runs),
        total_headcount=total_headcount,
        average_exposure=weighted_average(weighted_sum, weight, scores) or 0.0,
    )


def build_comparative_analytics(
    runs: Sequence[ComparativeRun],
    catalog: Optional[OccupationCatalog] = None,
    settings: Optional[Settings] = None,
) -> ComparativeAnalyticsPayload:
    """
    Build the cross-company payload.

    Args:
        runs: Finished runs; runs without a workforce metric are counted in
            coverage but contribute nothing else
        catalog: Occupational catalog for task ranking (default when None)
        settings: Thresholds and limits (cached settings when None)

    Returns:
        ComparativeAnalyticsPayload generated from scratch
    """
    settings = settings or get_settings()
    catalog = catalog if catalog is not None else get_default_catalog()

    countries: Dict[str, _GroupAccumulator] = OrderedDict()
    industries: Dict[str, _GroupAccumulator] = OrderedDict()
    heatmap: Dict[str, _HeatmapAccumulator] = OrderedDict()
    tasks: Dict[str, _TaskAccumulator] = OrderedDict()
    issues: List[ResolutionIssue] = []

    for index, run in enumerate(runs):
        metric = run.workforce_metric
        if metric is None:
            continue

        run_id = run.run_id or f"{run.company_id}#{index}"
        score = metric.score
        country = canonical_country(run.hq_country)
        industry = canonical_industry(run.industry)
        iso_code = resolve_iso_code(country)

        if country:
            _ensure_group(countries, country, iso_code).add(
                run_id, score, metric.automation_component, metric.augmentation_component,
                metric.total_headcount,
            )
        if industry:
            _ensure_group(industries, industry).add(
                run_id, score, metric.automation_component, metric.augmentation_component,
                metric.total_headcount,
            )
        if country and industry:
            key = f"{country.lower()}::{industry.lower()}"
            cell = heatmap.get(key)
            if cell is None:
                cell = heatmap[key] = _HeatmapAccumulator(country=country, industry=industry, iso_code=iso_code)
            cell.run_ids.add(run_id)
            if is_finite_number(score):
                cell.scores.append(score)
                if score >= settings.high_risk_threshold:
                    cell.high_risk += 1

        if run.report is not None:
            _accumulate_tasks(run, run_id, catalog, tasks, issues, settings)

    country_groups = sorted(
        countries.values(), key=lambda g: _group_sort_key(len(g.run_ids), g.average_score, g.label)
    )
    industry_groups = sorted(
        industries.values(), key=lambda g: _group_sort_key(len(g.run_ids), g.average_score, g.label)
    )

    country_metrics = [
        CountryMetric(
            country=group.label,
            iso_code=group.iso_code,
            run_count=len(group.run_ids),
            average_score=group.average_score,
            average_automation=group.average_automation,
            average_augmentation=group.average_augmentation,
            average_headcount=average(group.headcounts),
        )
        for group in country_groups
    ]
    industry_metrics = [
        IndustryMetric(
            industry=group.label,
            run_count=len(group.run_ids),
            average_score=group.average_score,
            average_automation=group.average_automation,
            average_augmentation=group.average_augmentation,
            average_headcount=average(group.headcounts),
        )
        for group in industry_groups
    ]

    heatmap_cells = [
        HeatmapCell(
            country=cell.country,
            iso_code=cell.iso_code,
            industry=cell.industry,
            run_count=len(cell.run_ids),
            average_score=average(cell.scores),
            high_risk_share=cell.high_risk / len(cell.scores) if cell.scores else None,
        )
        for cell in heatmap.values()
    ]
    heatmap_cells.sort(
        key=lambda cell: (
            -cell.run_count,
            -(cell.average_score or 0.0),
            cell.country.casefold(),
            cell.industry.casefold(),
        )
    )

    payload = ComparativeAnalyticsPayload(
        coverage=_coverage(runs),
        countries=country_metrics,
        industries=industry_metrics,
        heatmap=heatmap_cells,
        distributions=Distributions(
            by_country=[group.distribution() for group in country_groups],
            by_industry=[group.distribution() for group in industry_groups],
        ),
        top_tasks=_rank_tasks(tasks, settings),
        issues=issues,
    )

    logger.info(
        f"Comparative analytics: {payload.coverage.runs} runs, {len(country_metrics)} countries, "
        f"{len(industry_metrics)} industries, {len(payload.top_tasks)} top tasks"
    )
    return payload
